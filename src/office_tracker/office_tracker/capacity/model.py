from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class CapacitySetting:
    """Organisation-wide office capacity for one weekday."""

    day_of_week: str
    capacity: int
    setting_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {"id": self.setting_id, "dayOfWeek": self.day_of_week, "capacity": self.capacity}


@dataclass(frozen=True)
class DayCapacity:
    day: str
    date: date
    capacity: int
    booked: int
    available: int
    is_overbooked: bool
    utilization_percent: int

    @property
    def display_percent(self) -> int:
        """Progress-bar value; the true percentage stays in ``utilization_percent``."""
        return min(self.utilization_percent, 100)

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "date": self.date.isoformat(),
            "capacity": self.capacity,
            "booked": self.booked,
            "available": self.available,
            "isOverbooked": self.is_overbooked,
            "utilizationPercent": self.utilization_percent,
        }


@dataclass(frozen=True)
class WeekCapacity:
    week_start: date
    week_end: date
    days: tuple[DayCapacity, ...]
    total_available: int
    total_booked: int
    average_utilization: int

    @property
    def overbooked_days(self) -> list[DayCapacity]:
        return [d for d in self.days if d.is_overbooked]

    def to_dict(self) -> dict:
        return {
            "weekStart": self.week_start.isoformat(),
            "weekEnd": self.week_end.isoformat(),
            "weekData": [d.to_dict() for d in self.days],
            "totalAvailable": self.total_available,
            "totalBookings": self.total_booked,
            "averageUtilization": self.average_utilization,
        }
