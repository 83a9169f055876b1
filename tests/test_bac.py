"""BAC replay: Widmark rise, linear elimination. Run from project root: pytest tests/ -v"""
from datetime import datetime, timedelta

import pytest

from drinkstats.calculations import (
    R_FEMALE,
    R_MALE,
    bac_rise_from_grams,
    eliminate,
    estimate_bac,
    hours_until_bac,
    replay_bac,
)
from drinkstats.profile import UserProfile

MALE_75 = UserProfile(weight_kg=75, gender="male")


def test_single_beer_immediate_bac(drink):
    beer = drink(date="2024-01-05", time="20:00", quantity=33, strength=5.0)
    assert beer.ethanol_grams == pytest.approx(13.2)

    est = estimate_bac([beer], MALE_75, at=datetime(2024, 1, 5, 20, 0))
    assert est.current_concentration == pytest.approx(13.2 / (75 * 0.68))
    assert est.current_concentration == pytest.approx(0.2588, abs=1e-4)
    assert est.raw_grams_of_ethanol == pytest.approx(13.2)


@pytest.mark.parametrize("grams,weight,r", [(0, 60, 0.55), (14, 80, 0.68), (40.5, 95.2, 0.7)])
def test_rise_is_grams_over_body_water(grams, weight, r):
    assert bac_rise_from_grams(grams, weight, r) == grams / (weight * r)


def test_elimination_floor():
    assert eliminate(0.5, 2) == pytest.approx(0.2)
    assert eliminate(0.1, 2) == 0.0
    assert eliminate(0.3, 0) == 0.3


def test_two_drinks_replay(drink):
    events = [drink(time="20:00"), drink(time="21:00")]
    rise = 13.2 / (75 * 0.68)
    at_second = replay_bac(events, 75, R_MALE, datetime(2024, 1, 5, 21, 0))
    assert at_second == pytest.approx(rise - 0.15 + rise)
    later = replay_bac(events, 75, R_MALE, datetime(2024, 1, 5, 22, 0))
    assert later == pytest.approx(at_second - 0.15)


def test_non_increasing_after_last_drink(drink):
    events = [drink(time="20:00", quantity=50, strength=12.0)]
    start = datetime(2024, 1, 5, 20, 0)
    values = [
        estimate_bac(events, MALE_75, at=start + timedelta(minutes=15 * i)).current_concentration
        for i in range(30)
    ]
    assert all(b <= a for a, b in zip(values, values[1:]))
    assert values[-1] == 0.0


def test_pure_elapsed_time(drink):
    events = [drink(time="20:00")]
    prior = estimate_bac(events, MALE_75, at=datetime(2024, 1, 5, 20, 0)).current_concentration
    for hours in (0.5, 1.0, 1.5, 3.0):
        at = datetime(2024, 1, 5, 20, 0) + timedelta(hours=hours)
        est = estimate_bac(events, MALE_75, at=at)
        assert est.current_concentration == pytest.approx(max(0.0, prior - 0.15 * hours))


def test_clearance_between_drinks_is_floored(drink):
    # The first beer is gone long before the second one.
    events = [drink(date="2024-01-04", time="20:00"), drink(date="2024-01-05", time="20:00")]
    est = estimate_bac(events, MALE_75, at=datetime(2024, 1, 5, 20, 0))
    assert est.current_concentration == pytest.approx(13.2 / (75 * 0.68))


def test_skips_soft_drinks_untimed_and_future(drink):
    events = [
        drink(time="20:00"),
        drink(time="20:10", name="Cola", strength=None),
        drink(time="bad"),
        drink(time="23:00"),
    ]
    est = estimate_bac(events, MALE_75, at=datetime(2024, 1, 5, 20, 0))
    assert est.drink_count == 1
    assert est.raw_grams_of_ethanol == pytest.approx(13.2)


def test_missing_profile_is_unavailable(drink):
    events = [drink()]
    assert estimate_bac(events, UserProfile()) is None
    assert estimate_bac(events, UserProfile(weight_kg=70)) is None
    assert estimate_bac(events, UserProfile(gender="female")) is None


def test_no_drinks_is_zero_not_unavailable():
    est = estimate_bac([], MALE_75, at=datetime(2024, 1, 5, 20, 0))
    assert est is not None
    assert est.current_concentration == 0.0
    assert est.hours_to_sobriety == 0.0


def test_gender_factors(drink):
    at = datetime(2024, 1, 5, 20, 0)
    events = [drink()]
    female = estimate_bac(events, UserProfile(weight_kg=60, gender="female"), at=at)
    other = estimate_bac(events, UserProfile(weight_kg=60, gender="x"), at=at)
    assert female.current_concentration == pytest.approx(13.2 / (60 * R_FEMALE))
    assert other.current_concentration == pytest.approx(13.2 / (60 * R_MALE))


def test_sobriety_and_legal_limit(drink):
    # Four strong beers at once.
    events = [drink(time="20:00", quantity=132, strength=8.0)]
    est = estimate_bac(events, UserProfile(weight_kg=60, gender="female"), at=datetime(2024, 1, 5, 20, 0))
    bac = 132 * 8.0 * 0.8 / 10 / (60 * 0.55)
    assert est.current_concentration == pytest.approx(bac)
    assert est.above_legal_limit is True
    assert est.hours_to_sobriety == pytest.approx(bac / 0.15)
    assert est.hours_to_legal_limit == pytest.approx((bac - 0.5) / 0.15)
    assert est.to_dict()["current_bac"] == round(bac, 4)


def test_hours_until_bac():
    assert hours_until_bac(0.3, 0.0) == pytest.approx(2.0)
    assert hours_until_bac(0.3, 0.5) == 0.0
