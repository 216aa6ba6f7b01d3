from __future__ import annotations

from dataclasses import dataclass

from .analytics.service import AnalyticsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .capacity.mysql_capacity_repository import MySQLCapacityRepository
from .capacity.repository import CapacityRepository
from .capacity.service import OfficeCapacityService
from .core.constants import DEFAULT_OFFICE_CAPACITY
from .database.connection import DBConfig, DatabaseConnection
from .delegations.mysql_delegation_repository import MySQLDelegationRepository
from .delegations.repository import DelegationRepository
from .delegations.service import DelegationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    delegations_repo: DelegationRepository
    capacity_repo: CapacityRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    delegation_service: DelegationService
    capacity_service: OfficeCapacityService
    analytics_service: AnalyticsService


def wire_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    delegations_repo: DelegationRepository,
    capacity_repo: CapacityRepository,
    default_capacity: int = DEFAULT_OFFICE_CAPACITY,
) -> Container:
    """Build every service on top of the given repositories."""

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        delegations_repo=delegations_repo,
        capacity_repo=capacity_repo,
        auth_service=AuthService(users_repo, delegations_repo),
        user_service=UserService(users_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo),
        delegation_service=DelegationService(delegations_repo, users_repo),
        capacity_service=OfficeCapacityService(capacity_repo, attendance_repo, default_capacity=default_capacity),
        analytics_service=AnalyticsService(attendance_repo, users_repo),
    )


def build_container(*, db_config: dict, default_capacity: int = DEFAULT_OFFICE_CAPACITY) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        delegations_repo=MySQLDelegationRepository(conn),
        capacity_repo=MySQLCapacityRepository(conn),
        default_capacity=default_capacity,
    )
