"""General section: totals, per-day/week/month averages and the change
against the previous period of the same kind."""

from datetime import timedelta
from typing import Any, Dict, Iterable, Optional, Sequence

from drinkstats.drinks import StandardizedEvent
from drinkstats.periods import PeriodRange, previous_period_range
from drinkstats.session import SESSION_GAP_HOURS, SessionList, segment_sessions

DAYS_PER_MONTH = 30.44

COMPARED_METRICS = (
    "total_drinks",
    "total_volume",
    "total_alcohol",
    "total_sessions",
    "unique_drinks",
    "sober_days",
    "avg_per_day",
    "avg_per_week",
)


def count_sober_days(events: Sequence[StandardizedEvent], period: PeriodRange) -> int:
    """Days of the (normalized) period with no logged drink."""
    start = period.start_date
    if start is None:
        return 0
    window = {start + timedelta(days=i) for i in range(period.days)}
    drinking = {e.day for e in events if e.day is not None}
    return len(window - drinking)


def calculate_basic_stats(
    events: Sequence[StandardizedEvent],
    period: PeriodRange,
    sessions: Optional[SessionList] = None,
    gap_hours: float = SESSION_GAP_HOURS,
) -> Dict[str, Any]:
    if sessions is None:
        sessions = segment_sessions(events, gap_hours)

    total_drinks = len(events)
    total_volume = sum(e.volume_cl for e in events)
    total_alcohol = sum(e.ethanol_grams for e in events)

    category_distribution: Dict[str, int] = {}
    for e in events:
        category_distribution[e.category] = category_distribution.get(e.category, 0) + 1

    days = period.days
    avg_per_day = total_drinks / days
    # No extrapolation for periods shorter than a week / month.
    avg_per_week = avg_per_day * 7 if days >= 7 else total_drinks
    avg_per_month = avg_per_day * DAYS_PER_MONTH if days >= 30 else total_drinks

    return {
        "total_drinks": total_drinks,
        "total_volume": round(total_volume, 1),
        "total_alcohol": round(total_alcohol, 1),
        "total_sessions": len(sessions),
        "unique_drinks": len({e.name for e in events}),
        "avg_per_day": round(avg_per_day, 1),
        "avg_per_week": round(avg_per_week, 1),
        "avg_per_month": round(avg_per_month, 1),
        "sober_days": count_sober_days(events, period),
        "days_in_period": days,
        "category_distribution": category_distribution,
    }


def calculate_period_comparison(current: Dict[str, Any], previous: Dict[str, Any]) -> Dict[str, int]:
    """Rounded percentage change per metric; +100 when starting from zero."""
    comparison = {}
    for metric in COMPARED_METRICS:
        prev = previous.get(metric) or 0
        curr = current.get(metric) or 0
        if prev == 0:
            comparison[metric] = 100 if curr > 0 else 0
        else:
            comparison[metric] = round((curr - prev) / prev * 100)
    return comparison


def calculate_general_stats(
    events: Sequence[StandardizedEvent],
    period: PeriodRange,
    sessions: Optional[SessionList] = None,
    history: Optional[Iterable[StandardizedEvent]] = None,
    gap_hours: float = SESSION_GAP_HOURS,
) -> Dict[str, Any]:
    """Stats for ``events``; ``history`` (any superset) feeds the previous-period comparison."""
    stats = calculate_basic_stats(events, period, sessions, gap_hours)
    stats["previous_period"] = None
    stats["period_comparison"] = None

    if history is None:
        return stats
    previous = previous_period_range(period)
    if previous is None:
        return stats

    previous_events = [e for e in history if previous.contains(e.day)]
    previous_stats = calculate_basic_stats(previous_events, previous, gap_hours=gap_hours)
    stats["previous_period"] = {"start": previous.start, "end": previous.end}
    stats["period_comparison"] = calculate_period_comparison(stats, previous_stats)
    return stats
