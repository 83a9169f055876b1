"""BAC estimate using Widmark-style rise and linear elimination.

Model:
- Rise: BAC (g/L) = grams / (weight_kg * r)
- r = 0.68 (male), 0.55 (female); unknown gender uses the larger factor
- Elimination: 0.15 g/L per hour, never below zero

Drinks are replayed in order: eliminate since the previous drink, then add
the new dose. The result is the concentration at the evaluation time.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from drinkstats.config import DEFAULT_CONFIG, StatsConfig
from drinkstats.drinks import StandardizedEvent
from drinkstats.profile import UserProfile

logger = logging.getLogger(__name__)

# Distribution ratio (Widmark r)
R_MALE = DEFAULT_CONFIG.distribution_factors["male"]
R_FEMALE = DEFAULT_CONFIG.distribution_factors["female"]

# Elimination rate (g/L per hour)
ELIMINATION_PER_HOUR = DEFAULT_CONFIG.elimination_per_hour


@dataclass(frozen=True)
class BACEstimate:
    current_concentration: float  # g/L
    raw_grams_of_ethanol: float
    hours_to_sobriety: float
    hours_to_legal_limit: float
    above_legal_limit: bool
    drink_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_bac": round(self.current_concentration, 4),
            "raw_grams_of_ethanol": round(self.raw_grams_of_ethanol, 1),
            "hours_to_sobriety": round(self.hours_to_sobriety, 2),
            "hours_to_legal_limit": round(self.hours_to_legal_limit, 2),
            "above_legal_limit": self.above_legal_limit,
            "drink_count": self.drink_count,
        }


def bac_rise_from_grams(grams_alcohol: float, weight_kg: float, r: float = R_MALE) -> float:
    """Immediate BAC rise (g/L) from a single dose of alcohol."""
    return grams_alcohol / (weight_kg * r)


def eliminate(bac: float, hours: float, rate: float = ELIMINATION_PER_HOUR) -> float:
    """BAC after ``hours`` with no further intake."""
    return max(0.0, bac - rate * max(0.0, hours))


def hours_until_bac(current: float, target: float = 0.0, rate: float = ELIMINATION_PER_HOUR) -> float:
    """Hours of elimination needed to get from ``current`` down to ``target``."""
    if current <= target or rate <= 0:
        return 0.0
    return (current - target) / rate


def _relevant_events(events: Iterable[StandardizedEvent], at: datetime) -> List[StandardizedEvent]:
    kept = []
    for e in events:
        if e.ethanol_grams <= 0:
            continue
        if e.timestamp is None:
            logger.debug("Drink %r has no timestamp, left out of BAC", e.name)
            continue
        if e.timestamp > at:
            continue
        kept.append(e)
    kept.sort(key=lambda e: e.timestamp)
    return kept


def replay_bac(
    events: Iterable[StandardizedEvent],
    weight_kg: float,
    r: float,
    at: datetime,
    rate: float = ELIMINATION_PER_HOUR,
) -> float:
    """Concentration (g/L) at ``at`` after replaying every drink up to then."""
    bac = 0.0
    previous: Optional[datetime] = None
    for e in _relevant_events(events, at):
        if previous is not None:
            bac = eliminate(bac, (e.timestamp - previous).total_seconds() / 3600.0, rate)
        bac += bac_rise_from_grams(e.ethanol_grams, weight_kg, r)
        previous = e.timestamp
    if previous is not None:
        bac = eliminate(bac, (at - previous).total_seconds() / 3600.0, rate)
    return bac


def estimate_bac(
    events: Iterable[StandardizedEvent],
    profile: UserProfile,
    at: Optional[datetime] = None,
    config: StatsConfig = DEFAULT_CONFIG,
) -> Optional[BACEstimate]:
    """Current BAC estimate, or None when weight/gender are not known."""
    if not profile.configured:
        return None
    if at is None:
        at = datetime.now()

    relevant = _relevant_events(events, at)
    r = config.distribution_factor(profile.gender)
    rate = config.elimination_per_hour
    bac = replay_bac(relevant, profile.weight_kg, r, at, rate)

    return BACEstimate(
        current_concentration=bac,
        raw_grams_of_ethanol=sum(e.ethanol_grams for e in relevant),
        hours_to_sobriety=hours_until_bac(bac, 0.0, rate),
        hours_to_legal_limit=hours_until_bac(bac, config.legal_limit_g_per_l, rate),
        above_legal_limit=bac > config.legal_limit_g_per_l,
        drink_count=len(relevant),
    )
