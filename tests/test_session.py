"""Session segmentation."""
import pytest

from drinkstats.session import segment_sessions


def test_one_hour_apart_is_one_session(drink):
    sessions = segment_sessions([
        drink(time="20:00", location="Le Cercle"),
        drink(time="21:00", location="Le Cercle"),
    ])
    assert len(sessions) == 1
    assert sessions.chronological[0].duration_hours == 1.0


def test_five_days_apart_is_two_sessions(drink):
    sessions = segment_sessions([drink(date="2024-01-01"), drink(date="2024-01-06")])
    assert len(sessions) == 2
    assert all(s.duration_hours == 0 for s in sessions.chronological)


def test_exactly_four_hours_merges(drink):
    sessions = segment_sessions([drink(time="18:00"), drink(time="22:00")])
    assert len(sessions) == 1
    assert sessions.chronological[0].duration_hours == 4.0


def test_just_over_four_hours_splits(drink):
    sessions = segment_sessions([drink(time="18:00"), drink(time="22:01")])
    assert len(sessions) == 2


def test_gap_measured_from_running_end(drink):
    # Each gap is under 4h even though the whole night spans 6.5h.
    sessions = segment_sessions([
        drink(date="2024-01-05", time="20:00"),
        drink(date="2024-01-05", time="23:00"),
        drink(date="2024-01-06", time="02:30"),
    ])
    assert len(sessions) == 1
    assert sessions.chronological[0].duration_hours == pytest.approx(6.5)


def test_unordered_input_and_orderings(drink):
    later = drink(date="2024-01-10", name="Later")
    earlier = drink(date="2024-01-02", name="Earlier")
    sessions = segment_sessions([later, earlier])
    assert [s.events[0].name for s in sessions.chronological] == ["Earlier", "Later"]
    assert [s.events[0].name for s in sessions.most_recent_first] == ["Later", "Earlier"]


def test_session_totals(drink):
    sessions = segment_sessions([
        drink(time="20:00", quantity=33, strength=5.0),
        drink(time="20:30", quantity=50, strength=None),
    ])
    s = sessions.chronological[0]
    assert s.drink_count == 2
    assert s.total_volume_cl == 83
    assert s.total_ethanol_grams == pytest.approx(13.2)
    out = s.to_dict()
    assert out["duration_hours"] == 0.5
    assert out["start_time"] == "2024-01-05T20:00"
    assert out["drinks"] == ["Jupiler", "Jupiler"]


def test_events_without_timestamp_are_left_out(drink):
    sessions = segment_sessions([drink(time="??"), drink(time="20:00")])
    assert len(sessions) == 1
    assert sessions.chronological[0].drink_count == 1


def test_empty_input():
    sessions = segment_sessions([])
    assert len(sessions) == 0
    assert sessions.most_recent_first == ()


def test_gap_must_be_positive(drink):
    with pytest.raises(ValueError):
        segment_sessions([drink()], gap_hours=0)
