from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Union

from ..common.datetime_utils import DateLike, date_key, normalize_date, week_bounds, working_days
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT, WORKDAY_SHORT_NAMES
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users import permissions
from ..users.hierarchy import is_report_of
from ..users.model import User
from ..users.repository import UserRepository
from ..users.session import SessionContext
from .model import AttendanceFilter, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

StatusLike = Union[AttendanceStatus, str]


def parse_status(value: StatusLike) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus.parse(value)
    except ValueError:
        raise ValidationError(f"Invalid status: {value!r} (expected office, remote or absent)")


def _stamp(record: AttendanceRecord) -> datetime:
    return record.updated_at or record.created_at or datetime.min


def dedupe_by_day(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    """One record per (user, calendar day), keyed on the canonical date string.

    Records fetched through different drivers or time zones can carry the same
    day in different shapes; the most recently updated one wins.
    """

    latest: dict[tuple[int, str], AttendanceRecord] = {}
    for r in records:
        key = (r.user_id, date_key(r.work_date))
        current = latest.get(key)
        if current is None or _stamp(r) >= _stamp(current):
            latest[key] = r

    out = [replace(r, work_date=normalize_date(r.work_date)) for r in latest.values()]
    out.sort(key=lambda x: (x.work_date, x.user_id))
    return out


class AttendanceService:
    """Use case: record and allocate daily work locations."""

    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def _write(self, *, user_id: int, work_date: DateLike, status: StatusLike, notes: Optional[str]) -> AttendanceRecord:
        day = normalize_date(work_date)
        record = self._attendance.upsert(
            user_id=int(user_id),
            work_date=day,
            status=parse_status(status),
            notes=optional_text(notes, "Notes"),
        )
        return record

    def set_own_attendance(
        self,
        context: SessionContext,
        *,
        work_date: DateLike,
        status: StatusLike,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Any signed-in user may set their own status for any day."""

        record = self._write(user_id=context.user_id, work_date=work_date, status=status, notes=notes)
        logger.info("user %s set %s on %s", context.user_id, record.status.value, record.work_date)
        return record

    def allocate_attendance(
        self,
        context: SessionContext,
        *,
        target_user_id: int,
        work_date: DateLike,
        status: StatusLike,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        actor = context.user
        if not permissions.can_allocate_attendance(actor):
            logger.warning("user %s (%s) may not allocate attendance", actor.user_id, actor.role.value)
            raise AuthorizationError("Only leads can allocate attendance")

        target = self._users.get_by_id(int(target_user_id))
        if not target:
            raise NotFoundError("User not found")
        own_record = actor.role == Role.TRIBE_LEAD and target.user_id == actor.user_id
        if not own_record and not is_report_of(actor, target):
            logger.warning("user %s may not allocate attendance for %s", actor.user_id, target.user_id)
            raise AuthorizationError("You can only allocate attendance for your own reports")

        record = self._write(user_id=target.user_id, work_date=work_date, status=status, notes=notes)
        logger.info(
            "user %s allocated %s to %s on %s", actor.user_id, record.status.value, target.user_id, record.work_date
        )
        return record

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        status: Optional[StatusLike] = None,
    ) -> list[AttendanceRecord]:
        query = AttendanceFilter(
            user_id=int(user_id) if user_id is not None else None,
            start_date=normalize_date(start_date) if start_date else None,
            end_date=normalize_date(end_date) if end_date else None,
            status=parse_status(status) if status else None,
        )
        return dedupe_by_day(self._attendance.list_records(query))

    def get_record(self, user_id: int, work_date: DateLike) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(int(user_id), normalize_date(work_date))

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        rows = dedupe_by_day(self._attendance.get_recent_for_user(int(user_id), int(limit)))
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows[:limit]

    def week_view(self, *, week_offset: int = 0, today: Optional[date] = None) -> dict:
        """Team grid: every user's Mon..Fri statuses for one week."""

        monday, sunday = week_bounds(week_offset, today=today)
        days = working_days(monday, sunday)
        records = self.list_records(start_date=monday, end_date=sunday)

        by_user: dict[int, dict[str, str]] = {}
        for r in records:
            by_user.setdefault(r.user_id, {})[date_key(r.work_date)] = r.status.value

        users = sorted(self._users.list_all(), key=lambda u: u.name.lower())
        return {
            "weekStart": monday.isoformat(),
            "weekEnd": sunday.isoformat(),
            "days": [{"date": d.isoformat(), "day": WORKDAY_SHORT_NAMES[d.weekday()]} for d in days],
            "rows": [{"user": u.to_dict(), "attendance": by_user.get(u.user_id, {})} for u in users],
        }

    def in_office_on(self, day: DateLike) -> list[User]:
        day = normalize_date(day)
        office_ids = {
            r.user_id for r in self.list_records(start_date=day, end_date=day, status=AttendanceStatus.OFFICE)
        }
        return [u for u in self._users.list_all() if u.user_id in office_ids]
