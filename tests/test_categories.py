"""Category grouping, shares and trend flags."""
import pytest

from drinkstats.categories import calculate_category_stats, compare_category_periods


def test_single_category_is_concentrated(drink):
    stats = calculate_category_stats([drink(), drink(name="Duvel", strength=8.5)])
    beer = stats["categories"]["Beer"]
    assert beer["percentage"] == 100
    assert stats["trends"]["concentrated"] is True
    assert stats["trends"]["balanced"] is False
    assert stats["dominant_category"] == "Beer"
    types = [r["type"] for r in stats["recommendations"]]
    assert "diversity" in types
    assert "concentration" in types


def test_counts_and_shares(drink):
    events = [
        drink(name="Jupiler"),
        drink(name="Jupiler"),
        drink(name="Duvel"),
        drink(name="Merlot", category="Wine", quantity=12, strength=13.0),
        drink(name="Gin Tonic", category="Cocktail", quantity=20, strength=10.0),
    ]
    stats = calculate_category_stats(events)
    assert sum(c["count"] for c in stats["categories"].values()) == len(events)
    total_pct = sum(c["percentage"] for c in stats["categories"].values())
    assert abs(total_pct - 100) <= stats["total_categories"]
    assert [c["name"] for c in stats["sorted_categories"]] == ["Beer", "Wine", "Cocktail"]
    beer = stats["categories"]["Beer"]
    assert beer["percentage"] == 60
    assert beer["favorite_drink"] == "Jupiler"
    assert beer["unique_drinks_count"] == 2
    assert beer["volume"] == 99
    assert stats["trends"]["balanced"] is True
    assert stats["trends"]["most_alcoholic"] == "Wine"


def test_favorite_tie_goes_to_first_seen(drink):
    stats = calculate_category_stats([drink(name="Orval"), drink(name="Chimay"), drink(name="Chimay"), drink(name="Orval")])
    assert stats["categories"]["Beer"]["favorite_drink"] == "Orval"


def test_locations_are_counted_not_exposed(drink):
    events = [drink(location="Le Cercle"), drink(location="Le Cercle"), drink(location="Delirium")]
    beer = calculate_category_stats(events)["categories"]["Beer"]
    assert beer["locations_count"] == 2
    assert not any(isinstance(v, (set, frozenset)) for v in beer.values())


def test_strong_category_recommendation(drink):
    events = [drink(name="Vodka", category="Spirits", quantity=4, strength=40.0), drink()]
    stats = calculate_category_stats(events)
    caution = [r for r in stats["recommendations"] if r["type"] == "alcohol"]
    assert caution and "Spirits" in caution[0]["message"]


def test_empty():
    stats = calculate_category_stats([])
    assert stats["categories"] == {}
    assert stats["total_categories"] == 0
    assert stats["dominant_category"] is None
    assert stats["trends"]["most_popular"] is None
    assert stats["recommendations"] == []


@pytest.mark.parametrize(
    "current,previous,expected",
    [
        ({"Beer": {"count": 6}}, {"Beer": {"count": 4}}, {"Beer": {"status": "increased", "change": 50}}),
        ({"Beer": {"count": 2}}, {"Beer": {"count": 4}}, {"Beer": {"status": "decreased", "change": -50}}),
        ({"Beer": {"count": 4}}, {"Beer": {"count": 4}}, {"Beer": {"status": "stable", "change": 0}}),
        ({"Wine": {"count": 1}}, {}, {"Wine": {"status": "new", "change": 100}}),
        ({}, {"Wine": {"count": 3}}, {"Wine": {"status": "disappeared", "change": -100}}),
    ],
)
def test_compare_category_periods(current, previous, expected):
    assert compare_category_periods(current, previous) == expected
