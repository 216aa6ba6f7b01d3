from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceFilter
from ..attendance.repository import AttendanceRepository
from ..attendance.service import dedupe_by_day
from ..common.datetime_utils import week_bounds
from ..core.constants import DEFAULT_OFFICE_CAPACITY
from ..core.enums import AttendanceStatus, Permission
from ..core.exceptions import ValidationError
from ..users.session import SessionContext
from .calculator import compute_week_capacity, normalize_day_name
from .model import CapacitySetting, WeekCapacity
from .repository import CapacityRepository

logger = logging.getLogger(__name__)


class OfficeCapacityService:
    def __init__(
        self,
        capacity: CapacityRepository,
        attendance: AttendanceRepository,
        *,
        default_capacity: int = DEFAULT_OFFICE_CAPACITY,
    ):
        self._capacity = capacity
        self._attendance = attendance
        self._default_capacity = int(default_capacity)

    def settings(self) -> Sequence[CapacitySetting]:
        return self._capacity.list_settings()

    def week_capacity(self, *, week_offset: int = 0, today: Optional[date] = None) -> WeekCapacity:
        monday, sunday = week_bounds(week_offset, today=today)
        records = dedupe_by_day(
            self._attendance.list_records(
                AttendanceFilter(start_date=monday, end_date=sunday, status=AttendanceStatus.OFFICE)
            )
        )
        return compute_week_capacity(
            week_offset,
            records,
            self._capacity.list_settings(),
            today=today,
            default_capacity=self._default_capacity,
        )

    def update_capacity(self, context: SessionContext, *, day_of_week: str, capacity: int) -> CapacitySetting:
        context.require(Permission.MANAGE_CAPACITY, "Only admins can change office capacity")

        day = normalize_day_name(day_of_week)
        try:
            capacity = int(capacity)
        except (TypeError, ValueError):
            raise ValidationError("Capacity must be a whole number")
        if capacity < 0:
            raise ValidationError("Capacity cannot be negative")

        setting = self._capacity.upsert_setting(day_of_week=day, capacity=capacity)
        logger.info("user %s set %s capacity to %s", context.user_id, day, capacity)
        return setting
