"""Per-category statistics: counts, shares, favorites and trends."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from drinkstats.drinks import StandardizedEvent

BALANCED_SHARE = 60
CONCENTRATED_SHARE = 80
HIGH_STRENGTH_PERCENT = 15


@dataclass
class _CategoryAccumulator:
    """Working totals for one category while walking the events."""

    name: str
    count: int = 0
    volume_cl: float = 0.0
    ethanol_grams: float = 0.0
    strengths: List[float] = field(default_factory=list)
    drink_counts: Dict[str, int] = field(default_factory=dict)
    locations: Set[str] = field(default_factory=set)

    def add(self, e: StandardizedEvent) -> None:
        self.count += 1
        self.volume_cl += e.volume_cl
        self.ethanol_grams += e.ethanol_grams
        if e.event.strength_percent:
            self.strengths.append(e.event.strength_percent)
        # dicts keep insertion order, so ties go to the first drink seen
        self.drink_counts[e.name] = self.drink_counts.get(e.name, 0) + 1
        if e.event.location:
            self.locations.add(e.event.location)

    def to_stat(self, total_events: int) -> "CategoryStat":
        favorite = None
        if self.drink_counts:
            top = max(self.drink_counts.values())
            favorite = next(n for n, c in self.drink_counts.items() if c == top)
        avg_strength = sum(self.strengths) / len(self.strengths) if self.strengths else 0.0
        return CategoryStat(
            name=self.name,
            count=self.count,
            volume=round(self.volume_cl, 1),
            avg_volume=round(self.volume_cl / self.count, 1),
            total_alcohol=round(self.ethanol_grams, 1),
            avg_alcohol_content=round(avg_strength, 1),
            favorite_drink=favorite,
            unique_drinks_count=len(self.drink_counts),
            locations_count=len(self.locations),
            percentage=round(self.count / total_events * 100) if total_events else 0,
        )


@dataclass(frozen=True)
class CategoryStat:
    name: str
    count: int
    volume: float
    avg_volume: float
    total_alcohol: float
    avg_alcohol_content: float
    favorite_drink: Optional[str]
    unique_drinks_count: int
    locations_count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "count": self.count,
            "volume": self.volume,
            "avg_volume": self.avg_volume,
            "total_alcohol": self.total_alcohol,
            "avg_alcohol_content": self.avg_alcohol_content,
            "favorite_drink": self.favorite_drink,
            "unique_drinks_count": self.unique_drinks_count,
            "locations_count": self.locations_count,
            "percentage": self.percentage,
        }


def _max_by(stats: Sequence[CategoryStat], key) -> str:
    best = stats[0]
    for s in stats[1:]:
        if key(s) > key(best):
            best = s
    return best.name


def analyze_category_trends(sorted_stats: Sequence[CategoryStat]) -> Dict[str, Any]:
    trends: Dict[str, Any] = {
        "most_popular": None,
        "most_alcoholic": None,
        "most_voluminous": None,
        "most_diverse": None,
        "balanced": False,
        "concentrated": False,
    }
    if not sorted_stats:
        return trends

    top = sorted_stats[0]
    trends["most_popular"] = top.name
    trends["most_alcoholic"] = _max_by(sorted_stats, lambda s: s.avg_alcohol_content)
    trends["most_voluminous"] = _max_by(sorted_stats, lambda s: s.volume)
    trends["most_diverse"] = _max_by(sorted_stats, lambda s: s.unique_drinks_count)
    trends["balanced"] = top.percentage <= BALANCED_SHARE
    trends["concentrated"] = top.percentage >= CONCENTRATED_SHARE
    return trends


def generate_category_recommendations(
    sorted_stats: Sequence[CategoryStat], trends: Mapping[str, Any]
) -> List[Dict[str, str]]:
    recommendations = []
    if len(sorted_stats) == 1:
        recommendations.append({
            "type": "diversity",
            "level": "info",
            "message": "You only drink one type of beverage.",
            "action": "Try other categories",
        })
    if trends.get("concentrated") and sorted_stats:
        top = sorted_stats[0]
        recommendations.append({
            "type": "concentration",
            "level": "warning",
            "message": f'{top.percentage}% of your consumption is "{top.name}".',
            "action": "Consider varying your choices",
        })
    strong = sorted(
        (s for s in sorted_stats if s.avg_alcohol_content > HIGH_STRENGTH_PERCENT),
        key=lambda s: s.avg_alcohol_content,
        reverse=True,
    )
    if strong:
        recommendations.append({
            "type": "alcohol",
            "level": "caution",
            "message": f"Watch out for strong drinks ({strong[0].name}: {strong[0].avg_alcohol_content}%).",
            "action": "Go easy on spirits",
        })
    return recommendations


def calculate_category_stats(events: Sequence[StandardizedEvent]) -> Dict[str, Any]:
    """Group by category; categories are ordered by count, most consumed first."""
    accumulators: Dict[str, _CategoryAccumulator] = {}
    for e in events:
        acc = accumulators.get(e.category)
        if acc is None:
            acc = accumulators[e.category] = _CategoryAccumulator(name=e.category)
        acc.add(e)

    total = len(events)
    stats = [acc.to_stat(total) for acc in accumulators.values()]
    # sorted() is stable: equal counts keep first-seen order
    stats.sort(key=lambda s: s.count, reverse=True)
    trends = analyze_category_trends(stats)

    return {
        "categories": {s.name: s.to_dict() for s in stats},
        "sorted_categories": [s.to_dict() for s in stats],
        "total_categories": len(stats),
        "dominant_category": stats[0].name if stats else None,
        "trends": trends,
        "recommendations": generate_category_recommendations(stats, trends),
    }


def compare_category_periods(
    current: Mapping[str, Mapping[str, Any]],
    previous: Mapping[str, Mapping[str, Any]],
) -> Dict[str, Dict[str, Any]]:
    """Per-category change in count between two ``categories`` mappings."""
    comparison: Dict[str, Dict[str, Any]] = {}
    for name, cur in current.items():
        prev = previous.get(name)
        if prev is None:
            comparison[name] = {"status": "new", "change": 100}
            continue
        if prev["count"] == 0:
            change = 100 if cur["count"] > 0 else 0
        else:
            change = round((cur["count"] - prev["count"]) / prev["count"] * 100)
        status = "increased" if change > 0 else "decreased" if change < 0 else "stable"
        comparison[name] = {"status": status, "change": change}

    for name in previous:
        if name not in current:
            comparison[name] = {"status": "disappeared", "change": -100}
    return comparison
