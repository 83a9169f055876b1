"""Health section: ethanol totals, guideline comparison, BAC and risk."""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from drinkstats.calculations import estimate_bac
from drinkstats.config import DEFAULT_CONFIG, StatsConfig
from drinkstats.drinks import StandardizedEvent
from drinkstats.periods import PeriodRange
from drinkstats.profile import UserProfile
from drinkstats.risk import analyze_health_risks, calculate_exceedance_days

logger = logging.getLogger(__name__)


def iso_week_key(day: date) -> str:
    year, week, _ = day.isocalendar()
    return f"{year}-{week}"


def daily_ethanol(events: Sequence[StandardizedEvent]) -> Dict[str, float]:
    """Grams of ethanol per calendar day (YYYY-MM-DD), days with alcohol only."""
    out: Dict[str, float] = {}
    for e in events:
        if e.ethanol_grams <= 0:
            continue
        day = e.day
        if day is None:
            logger.debug("Drink %r has no usable date, left out of daily totals", e.name)
            continue
        key = day.isoformat()
        out[key] = out.get(key, 0.0) + e.ethanol_grams
    return out


def weekly_ethanol(events: Sequence[StandardizedEvent]) -> Dict[str, float]:
    """Grams of ethanol per ISO week ("YYYY-W")."""
    out: Dict[str, float] = {}
    for e in events:
        day = e.day
        if e.ethanol_grams <= 0 or day is None:
            continue
        key = iso_week_key(day)
        out[key] = out.get(key, 0.0) + e.ethanol_grams
    return out


def weekly_average(total_grams: float, days: int) -> float:
    """Grams per week over ``days``; short periods are not extrapolated."""
    if days >= 7:
        return total_grams / days * 7
    return total_grams


def generate_health_advice(level: str, bac: Optional[Dict[str, Any]]) -> List[Dict[str, str]]:
    advice = []
    if level == "high":
        advice.append({
            "type": "urgent",
            "title": "Watch your consumption",
            "message": "Your consumption carries health risks.",
            "action": "Talk to a health professional",
        })
    elif level == "medium":
        advice.append({
            "type": "warning",
            "title": "Moderate your consumption",
            "message": "You are above public health guidelines.",
            "action": "Reduce quantities gradually",
        })
    else:
        advice.append({
            "type": "info",
            "title": "Moderate consumption",
            "message": "Your consumption stays within acceptable limits.",
            "action": "Keep drinking in moderation",
        })

    if bac and bac.get("above_legal_limit"):
        advice.append({
            "type": "urgent",
            "title": "High blood alcohol",
            "message": "Your estimated BAC is above the legal driving limit.",
            "action": "Do not drive; wait until you are fully sober",
        })
    return advice


def calculate_health_stats(
    events: Sequence[StandardizedEvent],
    period: PeriodRange,
    profile: UserProfile,
    at: Optional[datetime] = None,
    config: StatsConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """Guideline comparison, BAC estimate (None without a profile) and risk analysis."""
    daily = daily_ethanol(events)
    total = sum(daily.values())
    days = period.days
    weekly_avg = weekly_average(total, days)

    gender = profile.gender
    guideline = config.weekly_limit(gender)
    comparison = round(weekly_avg / guideline * 100) if guideline > 0 else None

    estimate = estimate_bac(events, profile, at=at, config=config)
    bac = estimate.to_dict() if estimate is not None else None

    risk = analyze_health_risks(weekly_avg, daily, gender, observed_days=days, config=config)

    return {
        "configured": profile.configured,
        "total_alcohol_grams": round(total, 1),
        "weekly_alcohol": round(weekly_avg, 1),
        "who_recommendation": guideline,
        "who_comparison": comparison,
        "bac_estimation": bac,
        "risk_analysis": risk.to_dict(),
        "exceedance_days": calculate_exceedance_days(daily, gender, config),
        "daily_alcohol": {k: round(v, 1) for k, v in sorted(daily.items())},
        "weekly_by_week": {k: round(v, 1) for k, v in weekly_ethanol(events).items()},
        "advice": generate_health_advice(risk.level, bac),
        "user_profile": profile.to_dict(),
    }
