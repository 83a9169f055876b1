"""Per-drink statistics, including how regularly each drink comes back."""

import statistics
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from drinkstats.drinks import StandardizedEvent
from drinkstats.periods import days_between

# Interval standard deviation (days) that maps to a regularity of 0.
MAX_REGULARITY_STDDEV = 30.0
STRONG_DRINK_PERCENT = 20


def calculate_regularity(dates: Iterable[date]) -> int:
    """0-100: high when the gaps between distinct consumption days are even."""
    distinct = sorted(set(d for d in dates if d is not None))
    if len(distinct) < 2:
        return 0
    gaps = [(b - a).days for a, b in zip(distinct, distinct[1:])]
    std_dev = statistics.pstdev(gaps)
    return round(max(0.0, 100 - (std_dev / MAX_REGULARITY_STDDEV) * 100))


def _std_dev(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    return round(statistics.pstdev(values), 1)


def _most_common_hour(hours: Sequence[int]) -> Optional[str]:
    if not hours:
        return None
    counts: Dict[int, int] = {}
    for h in hours:
        counts[h] = counts.get(h, 0) + 1
    top = max(counts.values())
    hour = next(h for h, c in counts.items() if c == top)
    return f"{hour:02d}h"


@dataclass
class _DrinkAccumulator:
    name: str
    category: str
    strength: float = 0.0
    count: int = 0
    volumes: List[float] = field(default_factory=list)
    ethanol_grams: float = 0.0
    dates: List[date] = field(default_factory=list)
    hours: List[int] = field(default_factory=list)
    locations: Set[str] = field(default_factory=set)
    units: Set[str] = field(default_factory=set)

    def add(self, e: StandardizedEvent) -> None:
        self.count += 1
        self.volumes.append(e.volume_cl)
        self.ethanol_grams += e.ethanol_grams
        if e.day is not None:
            self.dates.append(e.day)
        if e.hour is not None:
            self.hours.append(e.hour)
        self.units.add(e.event.unit)
        if e.event.location:
            self.locations.add(e.event.location)

    def to_stat(self) -> "DrinkStat":
        first = min(self.dates) if self.dates else None
        last = max(self.dates) if self.dates else None
        if first and last and first != last:
            frequency = round(self.count / days_between(first, last), 1)
        else:
            frequency = 0.0
        total_volume = sum(self.volumes)
        return DrinkStat(
            name=self.name,
            category=self.category,
            count=self.count,
            total_volume=round(total_volume, 1),
            avg_volume=round(total_volume / self.count, 1),
            alcohol_content=self.strength,
            total_alcohol=round(self.ethanol_grams, 1),
            first_consumed=first.isoformat() if first else None,
            last_consumed=last.isoformat() if last else None,
            frequency=frequency,
            regularity=calculate_regularity(self.dates),
            preferred_time=_most_common_hour(self.hours),
            volume_variability=_std_dev(self.volumes),
            locations_count=len(self.locations),
            units_count=len(self.units),
        )


@dataclass(frozen=True)
class DrinkStat:
    name: str
    category: str
    count: int
    total_volume: float
    avg_volume: float
    alcohol_content: float
    total_alcohol: float
    first_consumed: Optional[str]
    last_consumed: Optional[str]
    frequency: float
    regularity: int
    preferred_time: Optional[str]
    volume_variability: float
    locations_count: int
    units_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "count": self.count,
            "total_volume": self.total_volume,
            "avg_volume": self.avg_volume,
            "alcohol_content": self.alcohol_content,
            "total_alcohol": self.total_alcohol,
            "first_consumed": self.first_consumed,
            "last_consumed": self.last_consumed,
            "frequency": self.frequency,
            "regularity": self.regularity,
            "preferred_time": self.preferred_time,
            "volume_variability": self.volume_variability,
            "locations_count": self.locations_count,
            "units_count": self.units_count,
        }


def analyze_drink_trends(drinks: Sequence[DrinkStat]) -> Dict[str, Any]:
    trends: Dict[str, Any] = {
        "most_popular": None,
        "most_regular": None,
        "most_alcoholic": None,
        "most_voluminous": None,
        "most_recent": None,
        "diversity": "low",
    }
    if not drinks:
        return trends

    def best(key) -> str:
        top = drinks[0]
        for d in drinks[1:]:
            if key(d) > key(top):
                top = d
        return top.name

    trends["most_popular"] = drinks[0].name
    trends["most_regular"] = best(lambda d: d.regularity)
    trends["most_alcoholic"] = best(lambda d: d.alcohol_content)
    trends["most_voluminous"] = best(lambda d: d.avg_volume)
    trends["most_recent"] = best(lambda d: d.last_consumed or "")
    if len(drinks) >= 10:
        trends["diversity"] = "high"
    elif len(drinks) >= 5:
        trends["diversity"] = "medium"
    return trends


def generate_drink_recommendations(drinks: Sequence[DrinkStat], trends: Dict[str, Any]) -> List[Dict[str, str]]:
    recommendations = []
    if trends["diversity"] == "low":
        recommendations.append({
            "type": "diversity",
            "level": "info",
            "message": "You drink few different beverages.",
            "action": "Try new drinks to vary things",
        })
    if drinks and drinks[0].count > len(drinks) * 3:
        recommendations.append({
            "type": "dominance",
            "level": "info",
            "message": f'"{drinks[0].name}" makes up a large part of your consumption.',
            "action": "Vary your choices from time to time",
        })
    strong = sorted(
        (d for d in drinks if d.alcohol_content > STRONG_DRINK_PERCENT),
        key=lambda d: d.count,
        reverse=True,
    )
    if strong:
        recommendations.append({
            "type": "alcohol",
            "level": "caution",
            "message": f'Watch out for "{strong[0].name}" ({strong[0].alcohol_content}% alcohol).',
            "action": "Drink it in moderation",
        })
    return recommendations


def calculate_drink_stats(events: Sequence[StandardizedEvent], limit: int = 20) -> Dict[str, Any]:
    """Per-drink stats for the ``limit`` most consumed drinks."""
    accumulators: Dict[str, _DrinkAccumulator] = {}
    for e in events:
        acc = accumulators.get(e.name)
        if acc is None:
            acc = accumulators[e.name] = _DrinkAccumulator(
                name=e.name,
                category=e.category,
                strength=e.event.strength_percent or 0.0,
            )
        acc.add(e)

    stats = [acc.to_stat() for acc in accumulators.values()]
    stats.sort(key=lambda s: s.count, reverse=True)
    top = stats[: max(0, limit)]
    trends = analyze_drink_trends(top)

    return {
        "drinks": {s.name: s.to_dict() for s in top},
        "sorted_drinks": [s.to_dict() for s in top],
        "total_unique_drinks": len(stats),
        "top_drink": top[0].to_dict() if top else None,
        "trends": trends,
        "recommendations": generate_drink_recommendations(top, trends),
    }
