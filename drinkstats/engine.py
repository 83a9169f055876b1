"""Statistics engine: runs every section over one set of drinks.

Drinks are parsed and standardized once, filtered to the period and
segmented into sessions once; each section then works from those shared,
immutable values. Sections do not depend on each other, so they run
concurrently in worker threads. The profile is resolved first because
the health section needs it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from drinkstats.categories import calculate_category_stats
from drinkstats.config import DEFAULT_CONFIG, StatsConfig
from drinkstats.drink_stats import calculate_drink_stats
from drinkstats.drinks import UNIT_TABLE, StandardizedEvent, parse_events, standardize_events
from drinkstats.general import calculate_general_stats
from drinkstats.health import calculate_health_stats
from drinkstats.locations import calculate_location_stats
from drinkstats.periods import PeriodRange
from drinkstats.profile import ProfileProvider, UserProfile, resolve_profile
from drinkstats.session import SessionList, segment_sessions
from drinkstats.temporal import calculate_temporal_stats

logger = logging.getLogger(__name__)

SECTIONS = ("general", "temporal", "categories", "drinks", "health", "locations")


def _parse_evaluation_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning("Ignoring unparsable evaluation time %r", value)
        return None


@dataclass(frozen=True)
class StatsOptions:
    settings: UserProfile | None = None
    limit: int | None = None
    current_period: str = "custom"
    evaluation_time: datetime | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "StatsOptions":
        if not raw:
            return cls()
        if not isinstance(raw, Mapping):
            logger.warning("Ignoring options that are not a mapping: %r", raw)
            return cls()
        settings = raw.get("settings")
        if settings is not None and not isinstance(settings, Mapping):
            # Malformed settings fall back to the profile provider.
            logger.warning("Ignoring profile settings that are not a mapping: %r", settings)
            settings = None
        limit = raw.get("limit")
        try:
            limit = int(limit) if limit is not None else None
        except (TypeError, ValueError):
            logger.warning("Ignoring non-integer limit %r", limit)
            limit = None
        return cls(
            settings=UserProfile.from_dict(settings) if settings is not None else None,
            limit=limit,
            current_period=str(raw.get("currentPeriod") or raw.get("current_period") or "custom"),
            evaluation_time=_parse_evaluation_time(
                raw.get("evaluationTime") or raw.get("evaluation_time")
            ),
        )


@dataclass(frozen=True)
class PreparedDrinks:
    """Standardized drinks inside the period, plus their sessions.

    ``history`` keeps every standardized drink, in range or not, for the
    previous-period comparison.
    """

    period: PeriodRange
    events: tuple[StandardizedEvent, ...]
    sessions: SessionList
    history: tuple[StandardizedEvent, ...] = ()


class StatisticsEngine:
    def __init__(
        self,
        config: StatsConfig = DEFAULT_CONFIG,
        profile_provider: ProfileProvider | None = None,
        unit_table: Mapping[str, float] | None = None,
    ):
        self.config = config
        self.profile_provider = profile_provider
        table = dict(UNIT_TABLE if unit_table is None else unit_table)
        table.update(config.extra_units)
        self.unit_table = table

    def prepare(
        self,
        drinks: Iterable[Any],
        date_range: PeriodRange | Mapping[str, Any],
        current_period: str | None = None,
    ) -> PreparedDrinks:
        if isinstance(date_range, PeriodRange):
            period = date_range
        else:
            period = PeriodRange.from_dict(date_range, current_period)

        standardized = standardize_events(parse_events(drinks), self.unit_table)
        in_range = []
        for e in standardized:
            if period.contains(e.day):
                in_range.append(e)
            else:
                logger.debug("Drink %r on %r is outside %s..%s", e.name, e.event.date, period.start, period.end)
        sessions = segment_sessions(in_range, self.config.session_gap_hours)
        return PreparedDrinks(
            period=period,
            events=tuple(in_range),
            sessions=sessions,
            history=tuple(standardized),
        )

    def _run_section(
        self,
        name: str,
        prepared: PreparedDrinks,
        options: StatsOptions,
        profile: UserProfile,
    ) -> dict[str, Any]:
        events, period, sessions = prepared.events, prepared.period, prepared.sessions
        if name == "general":
            return calculate_general_stats(
                events, period, sessions,
                history=prepared.history,
                gap_hours=self.config.session_gap_hours,
            )
        if name == "temporal":
            return calculate_temporal_stats(events, period, sessions, self.config)
        if name == "categories":
            return calculate_category_stats(events)
        if name == "drinks":
            limit = options.limit if options.limit is not None else self.config.drink_limit
            return calculate_drink_stats(events, limit=limit)
        if name == "health":
            return calculate_health_stats(
                events, period, profile, at=options.evaluation_time, config=self.config
            )
        if name == "locations":
            return calculate_location_stats(events)
        raise ValueError(f"Unknown statistics section: {name}")

    async def calculate(
        self,
        drinks: Iterable[Any],
        date_range: PeriodRange | Mapping[str, Any],
        options: StatsOptions | Mapping[str, Any] | None = None,
        sections: Iterable[str] | None = None,
    ) -> dict[str, Any]:
        """Compute the requested sections (all by default) and return them by name."""
        if not isinstance(options, StatsOptions):
            options = StatsOptions.from_dict(options)
        wanted = list(sections) if sections is not None else list(SECTIONS)
        for name in wanted:
            if name not in SECTIONS:
                raise ValueError(f"Unknown statistics section: {name}")

        prepared = self.prepare(drinks, date_range, options.current_period)

        profile = UserProfile()
        if "health" in wanted:
            profile = await resolve_profile(options.settings, self.profile_provider)

        loop = asyncio.get_running_loop()
        results = await asyncio.gather(*[
            loop.run_in_executor(None, self._run_section, name, prepared, options, profile)
            for name in wanted
        ])
        logger.debug(
            "Computed %s for %d drinks in %s..%s",
            ", ".join(wanted), len(prepared.events), prepared.period.start, prepared.period.end,
        )
        return dict(zip(wanted, results))

    def calculate_sync(
        self,
        drinks: Iterable[Any],
        date_range: PeriodRange | Mapping[str, Any],
        options: StatsOptions | Mapping[str, Any] | None = None,
        sections: Iterable[str] | None = None,
    ) -> dict[str, Any]:
        return asyncio.run(self.calculate(drinks, date_range, options, sections))
