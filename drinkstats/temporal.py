"""Time-of-day, weekday and session statistics."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from drinkstats.config import DEFAULT_CONFIG, StatsConfig
from drinkstats.drinks import StandardizedEvent
from drinkstats.periods import PeriodRange, days_between
from drinkstats.session import Session, SessionList, segment_sessions

logger = logging.getLogger(__name__)

# Monday=0 ... Sunday=6, matching date.weekday().
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _round1(value: float) -> float:
    return round(value, 1)


def find_peak(distribution: Mapping[int, int]) -> Optional[int]:
    """First key (in iteration order) holding the maximum value."""
    if not distribution:
        return None
    top = max(distribution.values())
    return next(k for k, v in distribution.items() if v == top)


def hourly_distribution(events: Sequence[StandardizedEvent]) -> Dict[int, int]:
    buckets = {h: 0 for h in range(24)}
    for e in events:
        if e.hour is not None:
            buckets[e.hour] += 1
    return buckets


def weekday_distribution(events: Sequence[StandardizedEvent]) -> Dict[int, int]:
    """Counts per weekday, Monday first."""
    buckets = {d: 0 for d in range(7)}
    for e in events:
        day = e.day
        if day is not None:
            buckets[day.weekday()] += 1
    return buckets


def calculate_session_stats(sessions: SessionList) -> Dict[str, float]:
    if not len(sessions):
        return {
            "avg_duration": 0.0,
            "avg_time_between": 0.0,
            "avg_drinks_per_session": 0.0,
            "longest_session": 0.0,
            "shortest_session": 0.0,
        }

    chronological = sessions.chronological
    # Single-drink sessions have no duration to average.
    durations = [s.duration_hours for s in chronological if s.duration_hours > 0]
    avg_duration = sum(durations) / len(durations) if durations else 0.0

    gaps = []
    for prev, cur in zip(chronological, chronological[1:]):
        gap = (cur.start_time - prev.end_time).total_seconds() / 3600.0
        if gap > 0:
            gaps.append(gap)
    avg_between = sum(gaps) / len(gaps) if gaps else 0.0

    avg_drinks = sum(s.drink_count for s in chronological) / len(chronological)

    return {
        "avg_duration": _round1(avg_duration),
        "avg_time_between": _round1(avg_between),
        "avg_drinks_per_session": _round1(avg_drinks),
        "longest_session": _round1(max(durations)) if durations else 0.0,
        "shortest_session": _round1(min(durations)) if durations else 0.0,
    }


def analyze_consumption_patterns(events: Sequence[StandardizedEvent]) -> Dict[str, bool]:
    """Coarse habit flags: weekend, evening, night and regular drinking."""
    patterns = {
        "weekend_drinker": False,
        "evening_drinker": False,
        "night_drinker": False,
        "regular_drinker": False,
    }
    timed = [e for e in events if e.timestamp is not None]
    if not timed:
        return patterns

    weekend = weekday = evening = night = 0
    for e in timed:
        dow = e.timestamp.weekday()
        hour = e.timestamp.hour
        # Friday evening counts as weekend.
        if dow in (5, 6) or (dow == 4 and hour >= 18):
            weekend += 1
        else:
            weekday += 1
        if 18 <= hour <= 23:
            evening += 1
        elif 0 <= hour <= 2:
            night += 1

    n = len(timed)
    patterns["weekend_drinker"] = weekend > weekday * 1.5
    patterns["evening_drinker"] = evening > n * 0.6
    patterns["night_drinker"] = night > n * 0.3

    first = min(e.timestamp for e in timed).date()
    last = max(e.timestamp for e in timed).date()
    span = days_between(first, last)
    patterns["regular_drinker"] = span > 0 and n / span >= 1 / 3
    return patterns


def calculate_temporal_stats(
    events: Sequence[StandardizedEvent],
    period: PeriodRange,
    sessions: Optional[SessionList] = None,
    config: StatsConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """Hour/weekday histograms, peaks and session statistics for a period."""
    if sessions is None:
        sessions = segment_sessions(events, config.session_gap_hours)

    hourly = hourly_distribution(events)
    daily = weekday_distribution(events)
    session_stats = calculate_session_stats(sessions)

    days = sorted(d for d in (e.day for e in events) if d is not None)
    recent: List[Session] = list(sessions.most_recent_first[: config.recent_sessions])

    logger.debug("Temporal stats: %d drinks, %d sessions", len(events), len(sessions))
    return {
        "hourly_distribution": hourly,
        "daily_distribution": daily,
        "peak_hour": find_peak(hourly),
        "peak_day": find_peak(daily),
        "peak_day_name": WEEKDAY_NAMES[find_peak(daily)],
        "avg_session_duration": session_stats["avg_duration"],
        "avg_time_between_sessions": session_stats["avg_time_between"],
        "avg_drinks_per_session": session_stats["avg_drinks_per_session"],
        "longest_session": session_stats["longest_session"],
        "shortest_session": session_stats["shortest_session"],
        "total_sessions": len(sessions),
        "total_days_analyzed": period.days,
        "first_drink": days[0].isoformat() if days else None,
        "last_drink": days[-1].isoformat() if days else None,
        "sessions": [s.to_dict() for s in recent],
        "patterns": analyze_consumption_patterns(events),
    }
