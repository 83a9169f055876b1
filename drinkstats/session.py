"""
Drinking sessions: maximal runs of drinks with no gap longer than the
inactivity threshold (4 hours by default).
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Tuple

from drinkstats.drinks import StandardizedEvent

logger = logging.getLogger(__name__)

SESSION_GAP_HOURS = 4.0


@dataclass(frozen=True)
class Session:
    start_time: datetime
    end_time: datetime
    events: Tuple[StandardizedEvent, ...]

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600.0

    @property
    def drink_count(self) -> int:
        return len(self.events)

    @property
    def total_volume_cl(self) -> float:
        return sum(e.volume_cl for e in self.events)

    @property
    def total_ethanol_grams(self) -> float:
        return sum(e.ethanol_grams for e in self.events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time.isoformat(timespec="minutes"),
            "end_time": self.end_time.isoformat(timespec="minutes"),
            "duration_hours": round(self.duration_hours, 1),
            "drink_count": self.drink_count,
            "drinks": [e.name for e in self.events],
            "total_volume_cl": round(self.total_volume_cl, 1),
            "total_ethanol_grams": round(self.total_ethanol_grams, 1),
        }


@dataclass(frozen=True)
class SessionList:
    """Segmented sessions. Pick the ordering you need by name."""

    chronological: Tuple[Session, ...] = ()

    @property
    def most_recent_first(self) -> Tuple[Session, ...]:
        return tuple(reversed(self.chronological))

    def __len__(self) -> int:
        return len(self.chronological)


def segment_sessions(events: Iterable[StandardizedEvent], gap_hours: float = SESSION_GAP_HOURS) -> SessionList:
    """Group events into sessions; a gap strictly above ``gap_hours`` starts a new one."""
    if gap_hours <= 0:
        raise ValueError("gap_hours must be > 0")

    timed = []
    for e in events:
        if e.timestamp is None:
            logger.debug("Drink %r has no timestamp, left out of sessions", e.name)
            continue
        timed.append(e)
    timed.sort(key=lambda e: e.timestamp)

    gap_seconds = gap_hours * 3600.0
    groups: List[List[StandardizedEvent]] = []
    for e in timed:
        if groups and (e.timestamp - groups[-1][-1].timestamp).total_seconds() <= gap_seconds:
            groups[-1].append(e)
        else:
            groups.append([e])

    sessions = tuple(
        Session(start_time=g[0].timestamp, end_time=g[-1].timestamp, events=tuple(g))
        for g in groups
    )
    return SessionList(chronological=sessions)
