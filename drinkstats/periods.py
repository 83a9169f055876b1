"""Period day counts that stay inside the window a period label implies.

A "month" range that accidentally spans 31 days of a 30-day month would
otherwise inflate per-day and per-week averages.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"

PERIOD_TYPES = ("day", "week", "month", "year", "custom")


def parse_date(value) -> Optional[date]:
    """YYYY-MM-DD string (or date) -> date; None when it does not parse."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def days_between(start, end) -> int:
    """Inclusive day count between two dates, at least 1. Bad dates give 1."""
    start_d = parse_date(start)
    end_d = parse_date(end)
    if start_d is None or end_d is None:
        return 1
    return max(1, (end_d - start_d).days + 1)


def normalize_days_for_period(period_type: Optional[str], start, end) -> int:
    """Inclusive day count between start and end, capped by the period type.

    The month and year caps are taken from the start date only.
    """
    start_d = parse_date(start)
    end_d = parse_date(end)
    if start_d is None or end_d is None:
        return 1

    days = max(1, (end_d - start_d).days + 1)

    if period_type in ("day", "today"):
        return 1
    if period_type == "week":
        return min(days, 7)
    if period_type == "month":
        return min(days, calendar.monthrange(start_d.year, start_d.month)[1])
    if period_type == "year":
        return min(days, 366 if calendar.isleap(start_d.year) else 365)
    return days


@dataclass(frozen=True)
class PeriodRange:
    """Analysis window. ``start``/``end`` are YYYY-MM-DD strings."""

    start: str
    end: str
    type: str = "custom"

    @classmethod
    def from_dict(cls, raw: dict, period_type: Optional[str] = None) -> "PeriodRange":
        return cls(
            start=str(raw.get("start", "")),
            end=str(raw.get("end", "")),
            type=period_type or raw.get("type") or "custom",
        )

    @property
    def start_date(self) -> Optional[date]:
        return parse_date(self.start)

    @property
    def end_date(self) -> Optional[date]:
        return parse_date(self.end)

    @property
    def days(self) -> int:
        return normalize_days_for_period(self.type, self.start, self.end)

    def contains(self, day: Optional[date]) -> bool:
        """True when ``day`` is inside the range. Open-ended if a bound does not parse."""
        if day is None:
            return False
        start_d, end_d = self.start_date, self.end_date
        if start_d is not None and day < start_d:
            return False
        if end_d is not None and day > end_d:
            return False
        return True


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by whole months, clamping to the end of shorter months."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def previous_period_range(period: PeriodRange) -> Optional[PeriodRange]:
    """The window just before ``period``, or None if its bounds do not parse.

    day/today and week step back 1 and 7 days, month and year step back a
    calendar month or year (31 March -> 29 February). Custom ranges step
    back by their own inclusive length, ending the day before the start.
    """
    start_d, end_d = period.start_date, period.end_date
    if start_d is None or end_d is None:
        return None

    if period.type in ("day", "today"):
        prev_start = prev_end = start_d - timedelta(days=1)
    elif period.type == "week":
        prev_start, prev_end = start_d - timedelta(days=7), end_d - timedelta(days=7)
    elif period.type == "month":
        prev_start, prev_end = shift_months(start_d, -1), shift_months(end_d, -1)
    elif period.type == "year":
        prev_start, prev_end = shift_months(start_d, -12), shift_months(end_d, -12)
    else:
        length = days_between(start_d, end_d)
        prev_end = start_d - timedelta(days=1)
        prev_start = prev_end - timedelta(days=length - 1)

    return PeriodRange(
        start=prev_start.isoformat(),
        end=prev_end.isoformat(),
        type=period.type,
    )
