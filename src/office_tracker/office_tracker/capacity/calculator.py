"""Office capacity for a Monday-start week.

Pure functions over a snapshot of records and settings; safe to call again
after every refresh.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import normalize_date, week_bounds
from ..common.percentages import percentage, round_half_up
from ..core.constants import DEFAULT_OFFICE_CAPACITY, WORKDAY_NAMES
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import CapacitySetting, DayCapacity, WeekCapacity


def normalize_day_name(value: str) -> str:
    """``"mon"``, ``"MONDAY"`` or ``"Monday"`` -> ``"Monday"``."""

    if not isinstance(value, str):
        raise ValidationError(f"Invalid weekday: {value!r} (expected Monday to Friday)")
    v = value.strip().lower()
    for name in WORKDAY_NAMES:
        if v in (name.lower(), name[:3].lower()):
            return name
    raise ValidationError(f"Invalid weekday: {value!r} (expected Monday to Friday)")


def capacity_by_day(settings: Iterable[CapacitySetting], *, default: int = DEFAULT_OFFICE_CAPACITY) -> dict[str, int]:
    out = {name: int(default) for name in WORKDAY_NAMES}
    for s in settings:
        out[normalize_day_name(s.day_of_week)] = max(int(s.capacity), 0)
    return out


def compute_day_capacity(*, day: date, capacity: int, booked: int) -> DayCapacity:
    capacity = int(capacity)
    booked = int(booked)
    return DayCapacity(
        day=WORKDAY_NAMES[day.weekday()],
        date=day,
        capacity=capacity,
        booked=booked,
        available=max(capacity - booked, 0),
        is_overbooked=booked > capacity,
        utilization_percent=percentage(booked, capacity),
    )


def compute_week_capacity(
    week_offset: int,
    records: Iterable[AttendanceRecord],
    settings: Iterable[CapacitySetting],
    *,
    today: Optional[date] = None,
    default_capacity: int = DEFAULT_OFFICE_CAPACITY,
) -> WeekCapacity:
    """Per-weekday bookings against capacity for the week at ``week_offset``.

    ``booked`` counts distinct users with an office record that day; records of
    other statuses or outside the week are ignored.
    """

    monday, sunday = week_bounds(week_offset, today=today)
    capacities = capacity_by_day(settings, default=default_capacity)

    office_users: dict[date, set[int]] = {}
    for r in records:
        if r.status != AttendanceStatus.OFFICE:
            continue
        day = normalize_date(r.work_date)
        if monday <= day <= sunday:
            office_users.setdefault(day, set()).add(r.user_id)

    days = []
    for i in range(len(WORKDAY_NAMES)):
        day = monday + timedelta(days=i)
        days.append(
            compute_day_capacity(
                day=day,
                capacity=capacities[WORKDAY_NAMES[i]],
                booked=len(office_users.get(day, ())),
            )
        )

    return WeekCapacity(
        week_start=monday,
        week_end=sunday,
        days=tuple(days),
        total_available=sum(d.available for d in days),
        total_booked=sum(d.booked for d in days),
        average_utilization=round_half_up(sum(d.utilization_percent for d in days) / len(days)),
    )
