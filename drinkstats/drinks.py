"""Intake events and alcohol content helpers.

Volumes are normalized to centilitres; ethanol mass uses an approximate
density of 0.8 g/mL:

    grams = volume_cl * strength_percent * 0.8 / 10
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional

from drinkstats.periods import parse_date

logger = logging.getLogger(__name__)

# Ethanol density (g/mL), rounded as in the guideline literature.
ETHANOL_DENSITY = 0.8

# Centilitres per unit. EcoCup is the reusable festival cup, a fixed 25 cL serving.
UNIT_TABLE: Dict[str, float] = {
    "cL": 1.0,
    "mL": 0.1,
    "L": 100.0,
    "EcoCup": 25.0,
}

TIME_FORMAT = "%H:%M"


def standardize_volume(quantity: float, unit: Optional[str], unit_table: Mapping[str, float] = UNIT_TABLE) -> float:
    """Convert a quantity in ``unit`` to centilitres. Unknown units are taken as cL."""
    factor = unit_table.get(unit or "cL")
    if factor is None:
        logger.debug("Unknown unit %r, treating quantity as cL", unit)
        factor = 1.0
    return quantity * factor


def ethanol_grams(volume_cl: float, strength_percent: Optional[float]) -> float:
    """Grams of pure ethanol in ``volume_cl`` at ``strength_percent`` % ABV."""
    if not strength_percent or strength_percent <= 0:
        return 0.0
    return volume_cl * strength_percent * ETHANOL_DENSITY / 10


def parse_timestamp(day: str, time: str) -> Optional[datetime]:
    """Combine YYYY-MM-DD and HH:MM; None when either part does not parse."""
    d = parse_date(day)
    if d is None:
        return None
    try:
        t = datetime.strptime(str(time).strip()[:5], TIME_FORMAT).time()
    except (TypeError, ValueError):
        return None
    return datetime.combine(d, t)


def _first(raw: Mapping, *keys):
    for key in keys:
        if raw.get(key) not in (None, ""):
            return raw[key]
    return None


def _parse_coordinates(name, latitude, longitude):
    """(lat, lng) as floats, or (None, None) when missing or out of range."""
    if latitude is None or longitude is None:
        return None, None
    try:
        lat, lng = float(latitude), float(longitude)
    except (TypeError, ValueError):
        logger.warning("Drink %r has non-numeric coordinates, ignoring them", name)
        return None, None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        logger.warning("Drink %r has out-of-range coordinates %s,%s", name, lat, lng)
        return None, None
    return lat, lng


@dataclass(frozen=True)
class IntakeEvent:
    """One logged drink, as entered by the user."""

    name: str
    category: str
    quantity: float
    unit: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    strength_percent: Optional[float] = None
    location: Optional[str] = None  # address
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_dict(cls, raw: Mapping) -> "IntakeEvent":
        """Build from a record dict. Raises ValueError for unusable records."""
        if not isinstance(raw, Mapping):
            raise ValueError("drink record must be a mapping")

        name = _first(raw, "name")
        if name is None:
            raise ValueError("drink record has no name")

        try:
            quantity = float(raw["quantity"])
        except (KeyError, TypeError, ValueError):
            raise ValueError(f"drink {name!r} has no numeric quantity")

        strength = _first(raw, "strength_percent", "strengthPercent", "alcoholContent")
        if strength is not None:
            try:
                strength = float(strength)
            except (TypeError, ValueError):
                raise ValueError(f"drink {name!r} has a non-numeric strength")

        location = raw.get("location")
        coords = raw
        if isinstance(location, Mapping):
            if location.get("latitude") is not None:
                coords = location
            location = location.get("address")
        location = location or raw.get("address")
        latitude, longitude = _parse_coordinates(name, coords.get("latitude"), coords.get("longitude"))

        time = raw.get("time")
        if isinstance(time, int) and not isinstance(time, bool):
            # YAML 1.1 reads an unquoted 20:30 as the base-60 integer 1230
            time = f"{time // 60:02d}:{time % 60:02d}"

        return cls(
            name=str(name),
            category=str(_first(raw, "category") or "Other"),
            quantity=quantity,
            unit=str(_first(raw, "unit") or "cL"),
            date=str(raw.get("date") or ""),
            time=str(time or ""),
            strength_percent=strength,
            location=str(location) if location else None,
            latitude=latitude,
            longitude=longitude,
        )


@dataclass(frozen=True)
class StandardizedEvent:
    """An IntakeEvent with volume, ethanol and timestamp derived once."""

    event: IntakeEvent
    volume_cl: float
    ethanol_grams: float
    timestamp: Optional[datetime]

    @property
    def name(self) -> str:
        return self.event.name

    @property
    def category(self) -> str:
        return self.event.category

    @property
    def day(self) -> Optional[date]:
        return self.timestamp.date() if self.timestamp else parse_date(self.event.date)

    @property
    def hour(self) -> Optional[int]:
        return self.timestamp.hour if self.timestamp else None


def standardize_event(event: IntakeEvent, unit_table: Mapping[str, float] = UNIT_TABLE) -> StandardizedEvent:
    volume = standardize_volume(event.quantity, event.unit, unit_table)
    return StandardizedEvent(
        event=event,
        volume_cl=volume,
        ethanol_grams=ethanol_grams(volume, event.strength_percent),
        timestamp=parse_timestamp(event.date, event.time),
    )


def standardize_events(
    events: Iterable[IntakeEvent],
    unit_table: Mapping[str, float] = UNIT_TABLE,
) -> List[StandardizedEvent]:
    """Annotate every event once; downstream code reuses these values."""
    out = []
    for event in events:
        std = standardize_event(event, unit_table)
        if std.timestamp is None:
            logger.warning("Drink %r has unparsable date/time %r %r", event.name, event.date, event.time)
        out.append(std)
    return out


def parse_events(records: Iterable) -> List[IntakeEvent]:
    """Turn raw records (dicts or IntakeEvents) into IntakeEvents, skipping bad ones."""
    events = []
    for idx, raw in enumerate(records or []):
        if isinstance(raw, IntakeEvent):
            events.append(raw)
            continue
        try:
            events.append(IntakeEvent.from_dict(raw))
        except ValueError as exc:
            logger.warning("Skipping drink record %d: %s", idx, exc)
    return events
