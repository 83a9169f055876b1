import pytest

from drinkstats.drinks import IntakeEvent, standardize_event


def build_drink(
    date="2024-01-05",
    time="20:00",
    name="Jupiler",
    category="Beer",
    quantity=33,
    unit="cL",
    strength=5.0,
    location=None,
    latitude=None,
    longitude=None,
):
    return IntakeEvent(
        name=name,
        category=category,
        quantity=quantity,
        unit=unit,
        date=date,
        time=time,
        strength_percent=strength,
        location=location,
        latitude=latitude,
        longitude=longitude,
    )


@pytest.fixture
def drink():
    """Factory for standardized drinks with sensible beer defaults."""

    def make(**kwargs):
        return standardize_event(build_drink(**kwargs))

    return make


@pytest.fixture
def raw_drink():
    """Factory for plain dict records, as posted by a client."""

    def make(date="2024-01-05", time="20:00", name="Jupiler", category="Beer",
             quantity=33, unit="cL", alcoholContent=5.0, **extra):
        record = {
            "name": name,
            "category": category,
            "quantity": quantity,
            "unit": unit,
            "alcoholContent": alcoholContent,
            "date": date,
            "time": time,
        }
        record.update(extra)
        return record

    return make
