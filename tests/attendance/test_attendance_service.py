from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.office_tracker.office_tracker.attendance.service import AttendanceService, dedupe_by_day
from src.office_tracker.office_tracker.core.enums import AttendanceStatus
from src.office_tracker.office_tracker.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def test_set_own_attendance_twice_keeps_one_record(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)

    svc.set_own_attendance(make_context(4), work_date="2025-03-03", status="office")
    svc.set_own_attendance(make_context(4), work_date="2025-03-03", status="office")

    records = svc.list_records(user_id=4)
    assert len(records) == 1
    assert records[0].work_date == date(2025, 3, 3)
    assert records[0].status == AttendanceStatus.OFFICE


def test_last_write_wins(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    svc.set_own_attendance(make_context(4), work_date=date(2025, 3, 3), status="office", notes="desk 4")
    rec = svc.set_own_attendance(make_context(4), work_date=datetime(2025, 3, 3, 18, 30), status="remote")

    assert rec.status == AttendanceStatus.REMOTE
    assert rec.notes is None
    assert len(attendance_repo.all()) == 1


def test_timestamp_strings_map_to_the_same_day(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    svc.set_own_attendance(make_context(4), work_date="2025-03-03T00:00:00.000Z", status="office")
    svc.set_own_attendance(make_context(4), work_date="2025-03-03", status="absent")

    assert [r.status for r in svc.list_records(user_id=4)] == [AttendanceStatus.ABSENT]


def test_weekend_records_are_accepted(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    rec = svc.set_own_attendance(make_context(4), work_date="2025-03-08", status="remote")
    assert rec.work_date.weekday() == 5


def test_invalid_input_is_rejected_before_write(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    with pytest.raises(ValidationError):
        svc.set_own_attendance(make_context(4), work_date="2025-03-03", status="holiday")
    with pytest.raises(ValidationError):
        svc.set_own_attendance(make_context(4), work_date="03/03/2025", status="office")
    assert attendance_repo.upsert_calls == 0


def test_legacy_off_status_means_absent(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    rec = svc.set_own_attendance(make_context(4), work_date="2025-03-03", status="off")
    assert rec.status == AttendanceStatus.ABSENT


def test_reporter_cannot_allocate_for_anyone(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    for target in (5, 6, 2, 4):
        with pytest.raises(AuthorizationError):
            svc.allocate_attendance(make_context(4), target_user_id=target, work_date="2025-03-03", status="office")
    assert attendance_repo.upsert_calls == 0


def test_chapter_lead_allocates_only_own_reporters(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)

    with pytest.raises(AuthorizationError):
        svc.allocate_attendance(make_context(2), target_user_id=6, work_date="2025-03-03", status="office")

    rec = svc.allocate_attendance(make_context(2), target_user_id=4, work_date="2025-03-03", status="office")
    assert rec.user_id == 4
    assert attendance_repo.get_for_user_and_date(4, date(2025, 3, 3)).status == AttendanceStatus.OFFICE


def test_tribe_lead_allocates_for_anyone(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    svc.allocate_attendance(make_context(1), target_user_id=6, work_date="2025-03-03", status="remote")
    svc.allocate_attendance(make_context(1), target_user_id=3, work_date="2025-03-03", status="office")

    with pytest.raises(NotFoundError):
        svc.allocate_attendance(make_context(1), target_user_id=99, work_date="2025-03-03", status="office")


def test_delegate_keeps_chapter_lead_allocation_scope(attendance_repo, users_repo, delegations_repo, make_context):
    delegations_repo.create(delegator_id=1, delegate_id=2, start_date=date(2025, 3, 1), end_date=date(2025, 3, 31))
    svc = AttendanceService(attendance_repo, users_repo)

    with pytest.raises(AuthorizationError):
        svc.allocate_attendance(make_context(2), target_user_id=6, work_date="2025-03-03", status="office")


def test_dedupe_by_day_keeps_latest(attendance_repo):
    first = attendance_repo.add(4, date(2025, 3, 3), AttendanceStatus.OFFICE)
    stale = replace(first, attendance_id=99, status=AttendanceStatus.REMOTE, updated_at=datetime(2020, 1, 1))
    shifted = replace(first, work_date=datetime(2025, 3, 3, 23, 0))

    out = dedupe_by_day([first, stale, shifted])
    assert len(out) == 1
    assert out[0].status == AttendanceStatus.OFFICE
    assert type(out[0].work_date) is date


def test_week_view_and_in_office(attendance_repo, users_repo, today):
    attendance_repo.add(4, date(2025, 3, 3), AttendanceStatus.OFFICE)
    attendance_repo.add(4, date(2025, 3, 4), AttendanceStatus.REMOTE)
    attendance_repo.add(5, date(2025, 3, 6), AttendanceStatus.OFFICE)
    attendance_repo.add(6, date(2025, 3, 6), AttendanceStatus.ABSENT)
    svc = AttendanceService(attendance_repo, users_repo)

    view = svc.week_view(week_offset=0, today=today)
    assert view["weekStart"] == "2025-03-03"
    assert [d["day"] for d in view["days"]] == ["Mon", "Tue", "Wed", "Thu", "Fri"]
    ravi = next(row for row in view["rows"] if row["user"]["id"] == 4)
    assert ravi["attendance"] == {"2025-03-03": "office", "2025-03-04": "remote"}

    assert [u.user_id for u in svc.in_office_on(today)] == [5]
    assert svc.week_view(week_offset=-1, today=today)["weekStart"] == "2025-02-24"


def test_history_is_most_recent_first(attendance_repo, users_repo):
    for day in (3, 4, 5, 6):
        attendance_repo.add(4, date(2025, 3, day), AttendanceStatus.OFFICE)
    svc = AttendanceService(attendance_repo, users_repo)

    history = svc.history(4, limit=2)
    assert [r.work_date.day for r in history] == [6, 5]


def test_tribe_lead_may_allocate_own_record_but_chapter_lead_may_not(attendance_repo, users_repo, make_context):
    svc = AttendanceService(attendance_repo, users_repo)
    rec = svc.allocate_attendance(make_context(1), target_user_id=1, work_date="2025-03-03", status="remote")
    assert rec.user_id == 1

    with pytest.raises(AuthorizationError):
        svc.allocate_attendance(make_context(2), target_user_id=2, work_date="2025-03-03", status="office")


@pytest.mark.parametrize("status, notes", [(1, None), (None, None), ("office", 5), ("office", ["x"])])
def test_non_text_status_or_notes_raise_validation_error(attendance_repo, users_repo, make_context, status, notes):
    svc = AttendanceService(attendance_repo, users_repo)
    with pytest.raises(ValidationError):
        svc.set_own_attendance(make_context(4), work_date="2025-03-03", status=status, notes=notes)
    assert attendance_repo.upsert_calls == 0
