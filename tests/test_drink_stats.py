"""Per-drink statistics and the regularity score."""
from datetime import date, timedelta

import pytest

from drinkstats.drink_stats import calculate_drink_stats, calculate_regularity


def test_regularity_single_date_is_zero():
    assert calculate_regularity([date(2024, 1, 1)]) == 0
    assert calculate_regularity([]) == 0


def test_regularity_even_spacing_is_full():
    weekly = [date(2024, 1, 1) + timedelta(days=7 * i) for i in range(6)]
    assert calculate_regularity(weekly) == 100


@pytest.mark.parametrize(
    "dates,expected",
    [
        # gaps 1 and 61 days: std dev 30
        ([date(2024, 1, 1), date(2024, 1, 2), date(2024, 3, 3)], 0),
        # gaps 10 and 20 days: std dev 5
        ([date(2024, 1, 1), date(2024, 1, 11), date(2024, 1, 31)], 83),
    ],
)
def test_regularity_scale(dates, expected):
    assert calculate_regularity(dates) == expected


def test_regularity_collapses_same_day():
    dates = [date(2024, 1, 1), date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15)]
    assert calculate_regularity(dates) == 100


def test_drink_stats(drink):
    events = [
        drink(name="Orval", date="2024-01-01", time="20:10", location="Le Cercle"),
        drink(name="Orval", date="2024-01-08", time="20:45", location="Delirium"),
        drink(name="Orval", date="2024-01-15", time="22:00", quantity=50),
        drink(name="Cola", category="Soft", strength=None, date="2024-01-03"),
    ]
    stats = calculate_drink_stats(events)
    orval = stats["drinks"]["Orval"]
    assert orval["count"] == 3
    assert orval["first_consumed"] == "2024-01-01"
    assert orval["last_consumed"] == "2024-01-15"
    assert orval["regularity"] == 100
    assert orval["preferred_time"] == "20h"
    assert orval["locations_count"] == 2
    assert orval["units_count"] == 1
    assert orval["total_volume"] == 116
    assert stats["top_drink"]["name"] == "Orval"
    assert stats["total_unique_drinks"] == 2
    assert stats["drinks"]["Cola"]["regularity"] == 0
    assert stats["drinks"]["Cola"]["frequency"] == 0.0
    assert stats["trends"]["most_recent"] == "Orval"
    assert stats["trends"]["diversity"] == "low"


def test_limit(drink):
    events = [drink(name=f"Beer {i}") for i in range(5)] + [drink(name="Beer 0")]
    stats = calculate_drink_stats(events, limit=2)
    assert len(stats["sorted_drinks"]) == 2
    assert stats["sorted_drinks"][0]["name"] == "Beer 0"
    assert stats["total_unique_drinks"] == 5


def test_strong_drink_recommendation(drink):
    events = [drink(name="Rum", category="Spirits", quantity=4, strength=40.0)]
    recs = calculate_drink_stats(events)["recommendations"]
    assert any(r["type"] == "alcohol" and "Rum" in r["message"] for r in recs)


def test_empty():
    stats = calculate_drink_stats([])
    assert stats["drinks"] == {}
    assert stats["top_drink"] is None
    assert stats["trends"]["most_popular"] is None
