"""Guideline-based risk classification.

Scoring and classification are separate steps: ``score_risk`` adds up
independent factors, ``classify_score`` maps the total to a level.

    weekly > 1.5x limit          +40
    weekly > limit               +20
    heavy days (mean > 2x daily) +30, otherwise any day over the limit +15
    drinking-day frequency > 0.8 +20, > 0.5 +10

    score >= 50 high, >= 25 medium, else low
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from drinkstats.config import DEFAULT_CONFIG, StatsConfig
from drinkstats.periods import days_between, parse_date

HIGH_SCORE = 50
MEDIUM_SCORE = 25


@dataclass(frozen=True)
class RiskScore:
    score: int
    factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RiskProfile:
    level: str
    score: int
    factors: List[str]
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "score": self.score,
            "factors": list(self.factors),
            "recommendations": list(self.recommendations),
        }


def _observed_days(daily_grams: Mapping[str, float]) -> int:
    """Inclusive span between the first and last day in the mapping."""
    days = sorted(d for d in (parse_date(k) for k in daily_grams) if d is not None)
    if not days:
        return len(daily_grams)
    return days_between(days[0], days[-1])


def score_risk(
    weekly_grams: float,
    daily_grams: Mapping[str, float],
    gender: Optional[str],
    observed_days: Optional[int] = None,
    config: StatsConfig = DEFAULT_CONFIG,
) -> RiskScore:
    """Add up risk points from weekly volume, heavy days and frequency."""
    weekly_limit = config.weekly_limit(gender)
    daily_limit = config.daily_limit(gender)
    score = 0
    factors: List[str] = []
    recommendations: List[str] = []

    if weekly_grams > weekly_limit * 1.5:
        score += 40
        factors.append("Excessive weekly consumption")
        recommendations.append("Significantly reduce your weekly consumption")
    elif weekly_grams > weekly_limit:
        score += 20
        factors.append("Weekly consumption above guidelines")
        recommendations.append("Try to stay within the weekly guidelines")

    high_days = [g for g in daily_grams.values() if g > daily_limit]
    if high_days:
        mean_excess = sum(high_days) / len(high_days)
        if mean_excess > daily_limit * 2:
            score += 30
            factors.append("Heavy drinking episodes")
            recommendations.append("Avoid heavy drinking episodes")
        else:
            score += 15
            factors.append("Occasional days above the daily limit")
            recommendations.append("Moderate quantities when going out")

    drinking_days = sum(1 for g in daily_grams.values() if g > 0)
    if observed_days is None:
        observed_days = _observed_days(daily_grams)
    frequency = drinking_days / observed_days if observed_days > 0 else 0.0

    if frequency > 0.8:
        score += 20
        factors.append("Very frequent consumption")
        recommendations.append("Plan alcohol-free days")
    elif frequency > 0.5:
        score += 10
        factors.append("Frequent consumption")
        recommendations.append("Alternate with alcohol-free days")

    return RiskScore(score=score, factors=factors, recommendations=recommendations)


def classify_score(score: int) -> str:
    if score >= HIGH_SCORE:
        return "high"
    if score >= MEDIUM_SCORE:
        return "medium"
    return "low"


def analyze_health_risks(
    weekly_grams: float,
    daily_grams: Mapping[str, float],
    gender: Optional[str],
    observed_days: Optional[int] = None,
    config: StatsConfig = DEFAULT_CONFIG,
) -> RiskProfile:
    scored = score_risk(weekly_grams, daily_grams, gender, observed_days, config)
    level = classify_score(scored.score)
    recommendations = list(scored.recommendations)
    if level == "low":
        recommendations.append("Keep drinking in moderation")
    return RiskProfile(
        level=level,
        score=scored.score,
        factors=list(scored.factors),
        recommendations=recommendations,
    )


def calculate_exceedance_days(
    daily_grams: Mapping[str, float],
    gender: Optional[str],
    config: StatsConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """Days over the daily limit (moderate) and over twice the limit (heavy)."""
    daily_limit = config.daily_limit(gender)
    heavy_limit = daily_limit * 2
    moderate = heavy = 0
    max_daily = 0.0
    max_daily_date = None

    for day, grams in daily_grams.items():
        if grams > heavy_limit:
            heavy += 1
        elif grams > daily_limit:
            moderate += 1
        if grams > max_daily:
            max_daily = grams
            max_daily_date = day

    return {
        "moderate_exceedance": moderate,
        "heavy_exceedance": heavy,
        "total_exceedance": moderate + heavy,
        "max_daily": round(max_daily, 1),
        "max_daily_date": max_daily_date,
        "daily_limit": daily_limit,
    }
