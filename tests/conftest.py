from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.office_tracker.office_tracker.attendance.model import AttendanceFilter, AttendanceRecord
from src.office_tracker.office_tracker.capacity.model import CapacitySetting
from src.office_tracker.office_tracker.core.enums import AttendanceStatus, Role
from src.office_tracker.office_tracker.delegations.model import Delegation
from src.office_tracker.office_tracker.users.model import User
from src.office_tracker.office_tracker.users.session import SessionContext

# Thursday
TODAY = date(2025, 3, 6)


class InMemoryUsers:
    def __init__(self, users=()):
        self.users_by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self.users_by_id.values():
            if u.email.lower() == email.strip().lower():
                return u
        return None

    def list_all(self):
        return sorted(self.users_by_id.values(), key=lambda u: u.name)

    def create_user(self, *, email, name, password_hash, role, chapter_lead_id, team_name) -> int:
        user_id = max(self.users_by_id, default=0) + 1
        self.users_by_id[user_id] = User(
            user_id=user_id,
            email=email,
            name=name,
            role=role,
            chapter_lead_id=chapter_lead_id,
            team_name=team_name,
            is_first_login=True,
            password_hash=password_hash,
        )
        return user_id

    def update_profile(self, user_id, *, name, avatar) -> bool:
        user = self.users_by_id.get(int(user_id))
        if not user:
            return False
        self.users_by_id[user.user_id] = replace(user, name=name, avatar=avatar)
        return True

    def update_password(self, user_id, *, password_hash) -> bool:
        user = self.users_by_id.get(int(user_id))
        if not user:
            return False
        self.users_by_id[user.user_id] = replace(user, password_hash=password_hash, is_first_login=False)
        return True

    def delete_by_id(self, user_id) -> bool:
        return self.users_by_id.pop(int(user_id), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.upsert_calls = 0

    def add(self, user_id: int, work_date: date, status: AttendanceStatus, notes=None) -> AttendanceRecord:
        return self.upsert(user_id=user_id, work_date=work_date, status=status, notes=notes)

    def get_for_user_and_date(self, user_id, work_date):
        return self._by_user_date.get((int(user_id), work_date))

    def list_records(self, query: AttendanceFilter):
        out = []
        for r in self._by_user_date.values():
            if query.user_id is not None and r.user_id != query.user_id:
                continue
            if query.start_date is not None and r.work_date < query.start_date:
                continue
            if query.end_date is not None and r.work_date > query.end_date:
                continue
            if query.status is not None and r.status != query.status:
                continue
            out.append(r)
        return sorted(out, key=lambda r: (r.work_date, r.user_id))

    def get_recent_for_user(self, user_id, limit):
        items = [r for r in self._by_user_date.values() if r.user_id == int(user_id)]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def upsert(self, *, user_id, work_date, status, notes=None) -> AttendanceRecord:
        self.upsert_calls += 1
        key = (int(user_id), work_date)
        existing = self._by_user_date.get(key)
        stamp = datetime(2025, 1, 1) + timedelta(seconds=self.upsert_calls)
        if existing:
            rec = replace(existing, status=status, notes=notes, updated_at=stamp)
        else:
            self._id += 1
            rec = AttendanceRecord(
                attendance_id=self._id,
                user_id=int(user_id),
                work_date=work_date,
                status=status,
                notes=notes,
                created_at=stamp,
                updated_at=stamp,
            )
        self._by_user_date[key] = rec
        return rec

    def all(self):
        return list(self._by_user_date.values())


class InMemoryDelegations:
    def __init__(self, delegations=()):
        self._rows: dict[int, Delegation] = {d.delegation_id: d for d in delegations}

    def get_by_id(self, delegation_id):
        return self._rows.get(int(delegation_id))

    def list_all(self):
        return list(self._rows.values())

    def create(self, *, delegator_id, delegate_id, start_date, end_date) -> int:
        new_id = max(self._rows, default=0) + 1
        self._rows[new_id] = Delegation(
            delegation_id=new_id,
            delegator_id=delegator_id,
            delegate_id=delegate_id,
            start_date=start_date,
            end_date=end_date,
            is_active=True,
        )
        return new_id

    def set_active(self, delegation_id, *, is_active) -> bool:
        d = self._rows.get(int(delegation_id))
        if not d:
            return False
        self._rows[d.delegation_id] = replace(d, is_active=is_active)
        return True


class InMemoryCapacity:
    def __init__(self, capacities: Optional[dict[str, int]] = None):
        self._settings = {day: CapacitySetting(day_of_week=day, capacity=c) for day, c in (capacities or {}).items()}

    def list_settings(self):
        return list(self._settings.values())

    def upsert_setting(self, *, day_of_week, capacity):
        setting = CapacitySetting(day_of_week=day_of_week, capacity=capacity, setting_id=len(self._settings) + 1)
        self._settings[day_of_week] = setting
        return setting


TRIBE = User(user_id=1, email="tessa@example.com", name="Tessa Tribe", role=Role.TRIBE_LEAD)
CARL = User(user_id=2, email="carl@example.com", name="Carl Chapter", role=Role.CHAPTER_LEAD, team_name="Platform")
MONA = User(user_id=3, email="mona@example.com", name="Mona Chapter", role=Role.CHAPTER_LEAD, team_name="Mobile")
RAVI = User(user_id=4, email="ravi@example.com", name="Ravi Reporter", role=Role.REPORTER, chapter_lead_id=2)
RITA = User(user_id=5, email="rita@example.com", name="Rita Reporter", role=Role.REPORTER, chapter_lead_id=2)
MILO = User(user_id=6, email="milo@example.com", name="Milo Reporter", role=Role.REPORTER, chapter_lead_id=3)

ORG = (TRIBE, CARL, MONA, RAVI, RITA, MILO)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(ORG)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def delegations_repo() -> InMemoryDelegations:
    return InMemoryDelegations()


@pytest.fixture
def make_context(users_repo, delegations_repo, today):
    def _make(user_id: int, *, as_of: Optional[date] = None) -> SessionContext:
        return SessionContext(
            user=users_repo.get_by_id(user_id),
            delegations=tuple(delegations_repo.list_all()),
            today=as_of or today,
        )

    return _make


@pytest.fixture
def org() -> dict[str, User]:
    return {"tribe": TRIBE, "carl": CARL, "mona": MONA, "ravi": RAVI, "rita": RITA, "milo": MILO}


@pytest.fixture
def capacity_repo() -> InMemoryCapacity:
    return InMemoryCapacity({"Monday": 10, "Tuesday": 10, "Wednesday": 10, "Thursday": 10, "Friday": 10})


@pytest.fixture
def container(users_repo, attendance_repo, delegations_repo, capacity_repo):
    from src.office_tracker.office_tracker.container import wire_services

    return wire_services(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        delegations_repo=delegations_repo,
        capacity_repo=capacity_repo,
        default_capacity=0,
    )
