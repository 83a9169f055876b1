"""Location section: where drinks are logged and how spread out those places are.

Drinks are grouped by coordinates rounded to 5 decimals (about a metre),
so repeated check-ins at one bar land in the same place. Distances are
great-circle (haversine) distances in km, computed on precision-12
geohashes.
"""

import logging
import statistics
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import pygeohash as pgh

from drinkstats.drinks import StandardizedEvent
from drinkstats.temporal import find_peak

logger = logging.getLogger(__name__)

GROUP_PRECISION = 5
GEOHASH_PRECISION = 12
TOP_LOCATIONS = 10
UNKNOWN_ADDRESS = "Unknown location"


def _geohash(lat: float, lng: float) -> str:
    return pgh.encode(lat, lng, precision=GEOHASH_PRECISION)


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    return pgh.geohash_haversine_distance(_geohash(lat1, lng1), _geohash(lat2, lng2)) / 1000.0


def location_key(lat: float, lng: float, precision: int = GROUP_PRECISION) -> str:
    return f"{lat:.{precision}f},{lng:.{precision}f}"


@dataclass
class _PlaceAccumulator:
    key: str
    latitude: float
    longitude: float
    address: str
    count: int = 0
    volume_cl: float = 0.0
    ethanol_grams: float = 0.0
    categories: List[str] = field(default_factory=list)
    dates: Set[date] = field(default_factory=set)
    hours: Dict[int, int] = field(default_factory=dict)
    weekdays: Dict[int, int] = field(default_factory=dict)

    def add(self, e: StandardizedEvent) -> None:
        self.count += 1
        self.volume_cl += e.volume_cl
        self.ethanol_grams += e.ethanol_grams
        if e.category not in self.categories:
            self.categories.append(e.category)
        if e.day is not None:
            self.dates.add(e.day)
            self.weekdays[e.day.weekday()] = self.weekdays.get(e.day.weekday(), 0) + 1
        if e.hour is not None:
            self.hours[e.hour] = self.hours.get(e.hour, 0) + 1

    def to_stat(self) -> "PlaceStat":
        first = min(self.dates) if self.dates else None
        last = max(self.dates) if self.dates else None
        span = (last - first).days if first and last else 0
        hours = dict(sorted(self.hours.items()))
        weekdays = dict(sorted(self.weekdays.items()))
        return PlaceStat(
            id=self.key,
            latitude=self.latitude,
            longitude=self.longitude,
            address=self.address,
            count=self.count,
            categories=tuple(self.categories),
            unique_dates=len(self.dates),
            first_date=first.isoformat() if first else None,
            last_date=last.isoformat() if last else None,
            total_volume=round(self.volume_cl, 1),
            total_alcohol=round(self.ethanol_grams, 1),
            avg_volume=round(self.volume_cl / self.count, 1),
            avg_alcohol=round(self.ethanol_grams / self.count, 1),
            time_distribution=hours,
            day_distribution=weekdays,
            frequency=round(len(self.dates) / (span or 1), 2),
            preferred_hour=find_peak(hours),
            preferred_day=find_peak(weekdays),
        )


@dataclass(frozen=True)
class PlaceStat:
    id: str
    latitude: float
    longitude: float
    address: str
    count: int
    categories: Tuple[str, ...]
    unique_dates: int
    first_date: Optional[str]
    last_date: Optional[str]
    total_volume: float
    total_alcohol: float
    avg_volume: float
    avg_alcohol: float
    time_distribution: Dict[int, int]
    day_distribution: Dict[int, int]
    frequency: float
    preferred_hour: Optional[int]
    preferred_day: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "count": self.count,
            "categories": list(self.categories),
            "categories_count": len(self.categories),
            "unique_dates": self.unique_dates,
            "first_date": self.first_date,
            "last_date": self.last_date,
            "total_volume": self.total_volume,
            "total_alcohol": self.total_alcohol,
            "avg_volume": self.avg_volume,
            "avg_alcohol": self.avg_alcohol,
            "time_distribution": dict(self.time_distribution),
            "day_distribution": dict(self.day_distribution),
            "frequency": self.frequency,
            "preferred_hour": self.preferred_hour,
            "preferred_day": self.preferred_day,
        }


def group_locations_by_proximity(
    events: Sequence[StandardizedEvent], precision: int = GROUP_PRECISION
) -> Dict[str, _PlaceAccumulator]:
    """Bucket geolocated events by rounded coordinates; the first event names the place."""
    groups: Dict[str, _PlaceAccumulator] = {}
    for e in events:
        if not e.event.has_coordinates:
            continue
        lat, lng = e.event.latitude, e.event.longitude
        key = location_key(lat, lng, precision)
        group = groups.get(key)
        if group is None:
            group = groups[key] = _PlaceAccumulator(
                key=key,
                latitude=lat,
                longitude=lng,
                address=e.event.location or UNKNOWN_ADDRESS,
            )
        group.add(e)
    return groups


def calculate_location_group_stats(groups: Dict[str, _PlaceAccumulator]) -> List[PlaceStat]:
    """Per-place stats, most visited first (ties keep first-seen order)."""
    stats = [g.to_stat() for g in groups.values()]
    stats.sort(key=lambda s: s.count, reverse=True)
    return stats


def pairwise_distances(places: Sequence[PlaceStat]) -> Dict[str, float]:
    distances = [
        haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)
        for i, a in enumerate(places)
        for b in places[i + 1:]
    ]
    if not distances:
        return {"average": 0.0, "max": 0.0, "min": 0.0}
    return {
        "average": round(sum(distances) / len(distances), 2),
        "max": round(max(distances), 2),
        "min": round(min(distances), 2),
    }


def calculate_distance_stats(places: Sequence[PlaceStat]) -> Dict[str, Any]:
    """Distances (km) from each place to the mean position of all places."""
    if len(places) < 2:
        return {
            "average_distance": 0.0,
            "max_distance": 0.0,
            "min_distance": 0.0,
            "total_distance": 0.0,
            "distance_variability": 0.0,
            "center_point": None,
        }

    hashes = [_geohash(p.latitude, p.longitude) for p in places]
    center = pgh.mean(hashes)
    center_lat, center_lng = pgh.decode(center)
    distances = [pgh.geohash_haversine_distance(h, center) / 1000.0 for h in hashes]
    total = sum(distances)
    return {
        "average_distance": round(total / len(distances), 2),
        "max_distance": round(max(distances), 2),
        "min_distance": round(min(distances), 2),
        "total_distance": round(total, 2),
        "distance_variability": round(statistics.pstdev(distances), 2),
        "center_point": {"latitude": float(center_lat), "longitude": float(center_lng)},
    }


def analyze_geographic_patterns(places: Sequence[PlaceStat], located_count: int) -> Dict[str, Any]:
    patterns: Dict[str, Any] = {
        "mobility": "low",
        "favorite_location": None,
        "location_diversity": "low",
        "average_distance": 0.0,
        "max_distance": 0.0,
        "exploration_score": 0,
    }
    if not places or located_count <= 0:
        return patterns

    top = places[0]
    patterns["favorite_location"] = {"id": top.id, "address": top.address, "count": top.count}

    if len(places) >= 10:
        patterns["location_diversity"] = "high"
    elif len(places) >= 5:
        patterns["location_diversity"] = "medium"

    top_share = top.count / located_count * 100
    if top_share < 30:
        patterns["mobility"] = "high"
    elif top_share < 60:
        patterns["mobility"] = "medium"

    if len(places) > 1:
        distances = pairwise_distances(places)
        patterns["average_distance"] = distances["average"]
        patterns["max_distance"] = distances["max"]

    patterns["exploration_score"] = round(len(places) / located_count * 100)
    return patterns


def generate_location_recommendations(
    places: Sequence[PlaceStat], patterns: Dict[str, Any], located_count: int
) -> List[Dict[str, str]]:
    if not places:
        return [{
            "type": "info",
            "title": "Turn on location",
            "message": "Allow location access to analyze where you drink.",
            "action": "Enable location in the settings",
        }]

    recommendations = []
    if patterns["mobility"] == "low":
        recommendations.append({
            "type": "info",
            "title": "Vary your places",
            "message": "You mostly drink in the same place.",
            "action": "Explore new places from time to time",
        })
    top = places[0]
    if top.count > located_count * 0.7:
        recommendations.append({
            "type": "info",
            "title": "Favorite place",
            "message": f'{round(top.count / located_count * 100)}% of your drinks are at "{top.address}".',
            "action": "Vary where you go out",
        })
    return recommendations


def calculate_location_stats(events: Sequence[StandardizedEvent]) -> Dict[str, Any]:
    located = [e for e in events if e.event.has_coordinates]
    total = len(events)
    coverage = {
        "with_location": len(located),
        "without_location": total - len(located),
        "percentage": round(len(located) / total * 100) if total else 0,
    }

    places = calculate_location_group_stats(group_locations_by_proximity(located))
    patterns = analyze_geographic_patterns(places, len(located))
    logger.debug("%d of %d drinks have coordinates, %d places", len(located), total, len(places))

    return {
        "has_location_data": bool(located),
        "total_locations": len(places),
        "locations": [p.to_dict() for p in places],
        "top_locations": [p.to_dict() for p in places[:TOP_LOCATIONS]],
        "geo_patterns": patterns,
        "distance_stats": calculate_distance_stats(places),
        "coverage": coverage,
        "recommendations": generate_location_recommendations(places, patterns, len(located)),
    }
