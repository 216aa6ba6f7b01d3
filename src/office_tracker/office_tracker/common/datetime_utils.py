from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Union

from ..core.constants import DATE_FORMAT
from ..core.exceptions import ValidationError

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def normalize_date(value: DateLike) -> date:
    """Strip any time-of-day/zone part and return the calendar date.

    Accepts ``date``, ``datetime`` and ISO strings such as ``2025-03-03`` or
    ``2025-03-03T00:00:00.000Z``. Only the leading calendar part of a string is
    used, so a UTC timestamp never shifts onto the neighbouring day.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return parse_iso_date(text[:10])
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
    raise ValidationError(f"Invalid date: {value!r}")


def date_key(value: DateLike) -> str:
    """Canonical ``YYYY-MM-DD`` key used for map lookups."""
    return normalize_date(value).strftime(DATE_FORMAT)


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mock easier.
    """
    return date.today()


def is_working_day(day: date) -> bool:
    return day.weekday() < 5


def week_bounds(week_offset: int = 0, *, today: date | None = None) -> tuple[date, date]:
    """Monday..Sunday of the week ``week_offset`` weeks away from ``today``."""
    today = today or today_local()
    monday = today - timedelta(days=today.weekday()) + timedelta(weeks=int(week_offset))
    return monday, monday + timedelta(days=6)


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def working_days(start: date, end: date) -> list[date]:
    return [d for d in iter_days(start, end) if is_working_day(d)]


def month_bounds(any_day: date) -> tuple[date, date]:
    first = any_day.replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    return first, next_first - timedelta(days=1)
