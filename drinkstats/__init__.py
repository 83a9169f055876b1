"""
Drink log statistics: sessions, time distributions, Widmark BAC estimate
and guideline risk classification.
Use from project root: python -m drinkstats.main drinks.yaml
"""

from drinkstats.drinks import (
    UNIT_TABLE,
    IntakeEvent,
    StandardizedEvent,
    ethanol_grams,
    parse_events,
    standardize_events,
    standardize_volume,
)
from drinkstats.periods import PeriodRange, normalize_days_for_period, previous_period_range
from drinkstats.locations import calculate_location_stats, haversine_km
from drinkstats.session import Session, SessionList, segment_sessions
from drinkstats.calculations import BACEstimate, bac_rise_from_grams, estimate_bac
from drinkstats.risk import RiskProfile, analyze_health_risks, classify_score, score_risk
from drinkstats.profile import (
    ProfileProvider,
    StaticProfileProvider,
    UserProfile,
    YamlProfileProvider,
)
from drinkstats.config import DEFAULT_CONFIG, StatsConfig, load_config
from drinkstats.engine import StatisticsEngine, StatsOptions

__all__ = [
    "IntakeEvent",
    "StandardizedEvent",
    "UNIT_TABLE",
    "standardize_volume",
    "ethanol_grams",
    "standardize_events",
    "parse_events",
    "PeriodRange",
    "normalize_days_for_period",
    "previous_period_range",
    "calculate_location_stats",
    "haversine_km",
    "Session",
    "SessionList",
    "segment_sessions",
    "BACEstimate",
    "bac_rise_from_grams",
    "estimate_bac",
    "RiskProfile",
    "score_risk",
    "classify_score",
    "analyze_health_risks",
    "UserProfile",
    "ProfileProvider",
    "StaticProfileProvider",
    "YamlProfileProvider",
    "StatsConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "StatisticsEngine",
    "StatsOptions",
]
