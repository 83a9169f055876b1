"""Volume normalization, ethanol mass and record parsing."""
import logging
from datetime import datetime

import pytest

from drinkstats.drinks import (
    IntakeEvent,
    ethanol_grams,
    parse_events,
    standardize_event,
    standardize_events,
    standardize_volume,
)
from conftest import build_drink


def test_standardize_volume_units():
    assert standardize_volume(33, "cL") == 33
    assert standardize_volume(1, "L") == 100
    assert standardize_volume(250, "mL") == pytest.approx(25)


def test_ecocup_scales_with_quantity():
    assert standardize_volume(1, "EcoCup") == 25
    assert standardize_volume(2, "EcoCup") == 50
    assert standardize_volume(0.5, "EcoCup") == 12.5


def test_unknown_unit_is_centilitres():
    assert standardize_volume(12, "bucket") == 12
    assert standardize_volume(12, None) == 12


def test_custom_unit_table():
    assert standardize_volume(2, "pint", {"pint": 56.8}) == pytest.approx(113.6)


def test_ethanol_grams():
    assert ethanol_grams(33, 5) == pytest.approx(13.2)
    assert ethanol_grams(4, 40) == pytest.approx(12.8)
    assert ethanol_grams(33, None) == 0.0
    assert ethanol_grams(33, 0) == 0.0


def test_standardize_event_derives_once():
    std = standardize_event(build_drink(quantity=2, unit="EcoCup", strength=5.0, time="21:15"))
    assert std.volume_cl == 50
    assert std.ethanol_grams == pytest.approx(20.0)
    assert std.timestamp == datetime(2024, 1, 5, 21, 15)
    assert std.hour == 21


def test_no_strength_still_has_volume():
    std = standardize_event(build_drink(name="Cola", category="Soft", strength=None))
    assert std.volume_cl == 33
    assert std.ethanol_grams == 0.0


def test_unparsable_time_keeps_day(caplog):
    with caplog.at_level(logging.WARNING):
        [std] = standardize_events([build_drink(time="late")])
    assert std.timestamp is None
    assert std.day.isoformat() == "2024-01-05"
    assert "unparsable" in caplog.text


def test_from_dict_accepts_client_keys():
    event = IntakeEvent.from_dict({
        "name": "Chimay Bleue",
        "category": "Beer",
        "quantity": "33",
        "unit": "cL",
        "alcoholContent": 9,
        "date": "2024-03-01",
        "time": "19:45",
        "location": {"address": "Grand Place", "latitude": 50.8},
    })
    assert event.quantity == 33.0
    assert event.strength_percent == 9.0
    assert event.location == "Grand Place"


def test_from_dict_yaml_sexagesimal_time():
    event = IntakeEvent.from_dict({"name": "Wine", "quantity": 12, "date": "2024-03-01", "time": 1230})
    assert event.time == "20:30"
    assert event.category == "Other"
    assert event.unit == "cL"


def test_from_dict_rejects_missing_quantity():
    with pytest.raises(ValueError):
        IntakeEvent.from_dict({"name": "Mystery", "date": "2024-03-01", "time": "20:00"})
    with pytest.raises(ValueError):
        IntakeEvent.from_dict({"name": "Mystery", "quantity": "lots"})
    with pytest.raises(ValueError):
        IntakeEvent.from_dict({"quantity": 33})


def test_parse_events_skips_bad_records(caplog):
    records = [
        {"name": "Beer", "quantity": 33, "date": "2024-03-01", "time": "20:00"},
        {"name": "Broken"},
        "not a record",
        build_drink(),
    ]
    with caplog.at_level(logging.WARNING):
        events = parse_events(records)
    assert [e.name for e in events] == ["Beer", "Jupiler"]
    assert "Skipping drink record 1" in caplog.text
    assert "Skipping drink record 2" in caplog.text


def test_from_dict_keeps_coordinates():
    event = IntakeEvent.from_dict({
        "name": "Kwak",
        "quantity": 33,
        "date": "2024-03-01",
        "location": {"address": "Grand Place", "latitude": "50.8467", "longitude": 4.3525},
    })
    assert event.location == "Grand Place"
    assert (event.latitude, event.longitude) == (50.8467, 4.3525)
    assert event.has_coordinates


def test_from_dict_top_level_coordinates():
    event = IntakeEvent.from_dict({
        "name": "Kwak", "quantity": 33, "latitude": 0, "longitude": 0, "address": "Null Island",
    })
    assert event.has_coordinates
    assert event.location == "Null Island"


def test_from_dict_drops_bad_coordinates(caplog):
    with caplog.at_level(logging.WARNING):
        far = IntakeEvent.from_dict({"name": "Kwak", "quantity": 33, "location": {"latitude": 95, "longitude": 4}})
        junk = IntakeEvent.from_dict({"name": "Kwak", "quantity": 33, "latitude": "north", "longitude": 4})
    assert not far.has_coordinates
    assert not junk.has_coordinates
    assert "coordinates" in caplog.text
