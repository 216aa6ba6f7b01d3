"""Attendance statistics over a date range and a set of users.

Every function here is pure: it takes an already-fetched snapshot of records
and never touches a repository.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import AbstractSet, Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import is_working_day, iter_days, month_bounds, normalize_date, working_days
from ..common.percentages import clamp, percentage, round_half_up
from ..core.constants import STREAK_LOOKBACK_DAYS, WORKDAY_NAMES, WORKDAY_SHORT_NAMES
from ..core.enums import AttendanceStatus
from .model import AnalyticsOverview, PersonalStats


def scoped_records(
    records: Iterable[AttendanceRecord],
    start: date,
    end: date,
    member_ids: AbstractSet[int],
) -> list[AttendanceRecord]:
    out = []
    for r in records:
        if r.user_id in member_ids and start <= normalize_date(r.work_date) <= end:
            out.append(r)
    return out


def _office_users_by_day(records: Iterable[AttendanceRecord]) -> dict[date, set[int]]:
    by_day: dict[date, set[int]] = {}
    for r in records:
        if r.status == AttendanceStatus.OFFICE:
            by_day.setdefault(normalize_date(r.work_date), set()).add(r.user_id)
    return by_day


def occupancy_data(records: Iterable[AttendanceRecord], start: date, end: date) -> list[dict]:
    by_day = _office_users_by_day(records)
    return [{"date": d.isoformat(), "count": len(by_day.get(d, ()))} for d in iter_days(start, end)]


def _weekday_averages(records: Iterable[AttendanceRecord], start: date, end: date) -> list[float]:
    by_day = _office_users_by_day(records)
    totals = [0] * len(WORKDAY_NAMES)
    occurrences = [0] * len(WORKDAY_NAMES)
    for d in working_days(start, end):
        occurrences[d.weekday()] += 1
        totals[d.weekday()] += len(by_day.get(d, ()))
    return [totals[i] / occurrences[i] if occurrences[i] else 0.0 for i in range(len(WORKDAY_NAMES))]


def weekly_pattern(records: Iterable[AttendanceRecord], start: date, end: date) -> list[dict]:
    averages = _weekday_averages(records, start, end)
    return [{"day": WORKDAY_SHORT_NAMES[i], "count": round_half_up(avg, 1)} for i, avg in enumerate(averages)]


def most_popular_day(records: Iterable[AttendanceRecord], start: date, end: date) -> Optional[str]:
    """Weekday with the highest average office count; earliest weekday on ties."""

    averages = _weekday_averages(records, start, end)
    best = max(averages) if averages else 0
    if best <= 0:
        return None
    # index() returns the first match, i.e. the earliest weekday.
    return WORKDAY_NAMES[averages.index(best)]


def status_distribution(records: Iterable[AttendanceRecord]) -> list[dict]:
    records = list(records)
    counts = {s: 0 for s in AttendanceStatus}
    for r in records:
        counts[r.status] += 1
    total = len(records)
    return [
        {"status": s.value, "count": counts[s], "percentage": percentage(counts[s], total)}
        for s in AttendanceStatus
    ]


def overview(records: Iterable[AttendanceRecord], start: date, end: date, *, total_users: int) -> AnalyticsOverview:
    records = list(records)
    by_day = _office_users_by_day(records)
    days = working_days(start, end)
    office_total = sum(len(by_day.get(d, ())) for d in days)
    remote = sum(1 for r in records if r.status == AttendanceStatus.REMOTE)

    return AnalyticsOverview(
        total_users=int(total_users),
        average_occupancy=percentage(office_total, total_users * len(days)),
        most_popular_day=most_popular_day(records, start, end),
        remote_work_rate=percentage(remote, len(records)),
    )


def current_streak(recorded_days: AbstractSet[date], anchor: date, *, lookback: int = STREAK_LOOKBACK_DAYS) -> int:
    """Consecutive working days with any record, walking back from ``anchor``.

    Weekends are skipped; the walk stops at the first unrecorded working day or
    after ``lookback`` calendar days.
    """

    streak = 0
    for offset in range(lookback):
        day = anchor - timedelta(days=offset)
        if not is_working_day(day):
            continue
        if day not in recorded_days:
            break
        streak += 1
    return streak


def personal_stats(
    records: Iterable[AttendanceRecord],
    user_id: int,
    *,
    today: date,
    month: Optional[date] = None,
) -> PersonalStats:
    month_start, month_end = month_bounds(month or today)
    period_end = min(today, month_end)

    mine = {normalize_date(r.work_date): r for r in records if r.user_id == int(user_id)}
    days = working_days(month_start, period_end)
    recorded = [d for d in days if d in mine]

    return PersonalStats(
        user_id=int(user_id),
        month=month_start.strftime("%Y-%m"),
        office_days=sum(1 for d in recorded if mine[d].status == AttendanceStatus.OFFICE),
        current_streak=current_streak(set(mine), period_end) if period_end >= month_start else 0,
        attendance_rate=clamp(percentage(len(recorded), len(days))),
    )
