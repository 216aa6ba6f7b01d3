from __future__ import annotations

from datetime import date

import pytest

from src.office_tracker.office_tracker.analytics import aggregator
from src.office_tracker.office_tracker.analytics.model import AnalyticsScope
from src.office_tracker.office_tracker.analytics.service import AnalyticsService, resolve_scope
from src.office_tracker.office_tracker.attendance.model import AttendanceRecord
from src.office_tracker.office_tracker.core.enums import AttendanceStatus
from src.office_tracker.office_tracker.core.exceptions import AuthorizationError, NotFoundError, ValidationError

OFFICE = AttendanceStatus.OFFICE
REMOTE = AttendanceStatus.REMOTE
ABSENT = AttendanceStatus.ABSENT

MON = date(2025, 3, 3)
FRI = date(2025, 3, 7)


def _rec(user_id: int, day: date, status: AttendanceStatus = OFFICE) -> AttendanceRecord:
    return AttendanceRecord(attendance_id=None, user_id=user_id, work_date=day, status=status)


def test_most_popular_day_prefers_earliest_on_tie():
    records = [_rec(4, date(2025, 3, 4)), _rec(5, date(2025, 3, 6))]
    assert aggregator.most_popular_day(records, MON, FRI) == "Tuesday"


def test_most_popular_day_is_none_without_office_records():
    assert aggregator.most_popular_day([_rec(4, MON, REMOTE)], MON, FRI) is None
    assert aggregator.most_popular_day([], MON, FRI) is None


def test_weekly_pattern_averages_per_occurrence():
    start, end = MON, date(2025, 3, 14)
    records = [_rec(4, MON), _rec(5, MON), _rec(4, date(2025, 3, 10))]

    pattern = aggregator.weekly_pattern(records, start, end)

    assert [p["day"] for p in pattern] == ["Mon", "Tue", "Wed", "Thu", "Fri"]
    assert pattern[0]["count"] == 1.5
    assert pattern[1]["count"] == 0


def test_occupancy_covers_every_day():
    data = aggregator.occupancy_data([_rec(4, MON), _rec(5, MON, REMOTE)], MON, date(2025, 3, 9))
    assert len(data) == 7
    assert data[0] == {"date": "2025-03-03", "count": 1}
    assert all(d["count"] == 0 for d in data[1:])


def test_status_distribution_and_overview():
    records = [_rec(4, MON), _rec(5, MON, REMOTE), _rec(4, date(2025, 3, 4), REMOTE), _rec(5, date(2025, 3, 4), ABSENT)]

    dist = aggregator.status_distribution(records)
    assert dist == [
        {"status": "office", "count": 1, "percentage": 25},
        {"status": "remote", "count": 2, "percentage": 50},
        {"status": "absent", "count": 1, "percentage": 25},
    ]

    ov = aggregator.overview(records, MON, FRI, total_users=2)
    assert ov.total_users == 2
    assert ov.average_occupancy == 10
    assert ov.most_popular_day == "Monday"
    assert ov.remote_work_rate == 50


def test_empty_scope_has_no_division_errors():
    ov = aggregator.overview([], MON, FRI, total_users=0)
    assert (ov.average_occupancy, ov.remote_work_rate, ov.most_popular_day) == (0, 0, None)
    assert all(d["percentage"] == 0 for d in aggregator.status_distribution([]))


def test_streak_stops_at_gap(today):
    recorded = {date(2025, 3, 3), date(2025, 3, 5), date(2025, 3, 6)}
    assert aggregator.current_streak(recorded, today) == 2


def test_streak_skips_weekends():
    recorded = {date(2025, 2, 28), date(2025, 3, 3)}
    assert aggregator.current_streak(recorded, date(2025, 3, 3)) == 2


def test_streak_is_bounded_by_lookback():
    recorded = {date(2025, 3, d) for d in range(1, 32)}
    assert aggregator.current_streak(recorded, date(2025, 3, 31), lookback=7) == 5


def test_personal_stats(today):
    records = [
        _rec(4, date(2025, 3, 3)),
        _rec(4, date(2025, 3, 5), REMOTE),
        _rec(4, date(2025, 3, 6)),
        _rec(4, date(2025, 3, 8)),
        _rec(5, date(2025, 3, 4)),
    ]
    stats = aggregator.personal_stats(records, 4, today=today)

    assert stats.month == "2025-03"
    assert stats.office_days == 2
    assert stats.current_streak == 2
    # 3 of the 4 working days so far
    assert stats.attendance_rate == 75


def test_attendance_rate_is_clamped_and_future_month_is_empty(today):
    records = [_rec(4, date(2025, 3, d)) for d in range(3, 7)]
    assert aggregator.personal_stats(records, 4, today=today).attendance_rate == 100

    future = aggregator.personal_stats(records, 4, today=today, month=date(2025, 4, 1))
    assert (future.office_days, future.current_streak, future.attendance_rate) == (0, 0, 0)


def test_scope_precedence(org, users_repo):
    users = users_repo.list_all()
    tribe = org["tribe"]

    both = resolve_scope(tribe, users, AnalyticsScope(user_id=6, chapter_lead_id=2))
    assert (both.kind, both.member_ids) == ("user", frozenset([6]))

    chapter = resolve_scope(tribe, users, AnalyticsScope(chapter_lead_id=2))
    assert chapter.member_ids == frozenset([2, 4, 5])
    assert chapter.label == "Platform"

    assert resolve_scope(tribe, users).kind == "organization"
    assert resolve_scope(org["carl"], users).member_ids == frozenset([2, 4, 5])
    assert resolve_scope(org["ravi"], users).member_ids == frozenset([2, 4, 5])


def test_scope_authorization(org, users_repo):
    users = users_repo.list_all()

    with pytest.raises(AuthorizationError):
        resolve_scope(org["ravi"], users, AnalyticsScope(everyone=True))
    with pytest.raises(AuthorizationError):
        resolve_scope(org["carl"], users, AnalyticsScope(chapter_lead_id=3))
    with pytest.raises(AuthorizationError):
        resolve_scope(org["carl"], users, AnalyticsScope(user_id=6))
    with pytest.raises(ValidationError):
        resolve_scope(org["tribe"], users, AnalyticsScope(chapter_lead_id=4))
    with pytest.raises(NotFoundError):
        resolve_scope(org["tribe"], users, AnalyticsScope(user_id=99))


def test_compute_analytics_for_a_team(attendance_repo, users_repo, make_context):
    attendance_repo.add(4, MON, OFFICE)
    attendance_repo.add(5, MON, OFFICE)
    attendance_repo.add(6, MON, OFFICE)
    attendance_repo.add(4, date(2025, 3, 4), REMOTE)
    svc = AnalyticsService(attendance_repo, users_repo)

    report = svc.compute_analytics(make_context(2), start_date="2025-03-03", end_date="2025-03-07")

    assert report.scope.kind == "team"
    assert report.occupancy_data[0] == {"date": "2025-03-03", "count": 2}
    assert report.overview.total_users == 3
    assert report.overview.most_popular_day == "Monday"
    assert report.to_dict()["overview"]["remoteWorkRate"] == 33


def test_compute_analytics_defaults_to_last_30_days(attendance_repo, users_repo, make_context, today):
    report = AnalyticsService(attendance_repo, users_repo).compute_analytics(make_context(1))
    assert report.end == today
    assert (report.end - report.start).days == 29
    assert len(report.occupancy_data) == 30


def test_compute_analytics_rejects_inverted_range(attendance_repo, users_repo, make_context):
    svc = AnalyticsService(attendance_repo, users_repo)
    with pytest.raises(ValidationError):
        svc.compute_analytics(make_context(1), start_date="2025-03-07", end_date="2025-03-03")


def test_personal_stats_visibility(attendance_repo, users_repo, make_context):
    attendance_repo.add(4, date(2025, 2, 28), OFFICE)
    attendance_repo.add(4, date(2025, 3, 3), OFFICE)
    svc = AnalyticsService(attendance_repo, users_repo)

    own = svc.compute_personal_stats(make_context(4))
    assert own.current_streak == 0

    lead_view = svc.compute_personal_stats(make_context(2), user_id=4, month="2025-02")
    assert lead_view.month == "2025-02"
    assert lead_view.current_streak == 1

    with pytest.raises(AuthorizationError):
        svc.compute_personal_stats(make_context(5), user_id=4)
    with pytest.raises(AuthorizationError):
        svc.compute_personal_stats(make_context(3), user_id=4)


def test_reporter_scope_is_limited_to_own_view(org, users_repo):
    users = users_repo.list_all()
    ravi = org["ravi"]

    assert resolve_scope(ravi, users, AnalyticsScope(user_id=4)).member_ids == frozenset([4])
    with pytest.raises(AuthorizationError):
        resolve_scope(ravi, users, AnalyticsScope(chapter_lead_id=2))
    with pytest.raises(AuthorizationError):
        resolve_scope(ravi, users, AnalyticsScope(user_id=5))
