from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Organisation roles, lowest tier first."""

    REPORTER = "REPORTER"
    CHAPTER_LEAD = "CHAPTER_LEAD"
    TRIBE_LEAD = "TRIBE_LEAD"


class AttendanceStatus(str, Enum):
    """Where a user works on a given day."""

    OFFICE = "office"
    REMOTE = "remote"
    ABSENT = "absent"

    @classmethod
    def parse(cls, value: str) -> "AttendanceStatus":
        if not isinstance(value, str):
            raise ValueError(f"{value!r} is not a valid {cls.__name__}")
        v = value.strip().lower()
        # Older clients sent "off" for absent.
        if v == "off":
            return cls.ABSENT
        return cls(v)


class Permission(str, Enum):
    ACCESS_ADMIN = "access_admin"
    VIEW_ANALYTICS = "view_analytics"
    ALLOCATE_ATTENDANCE = "allocate_attendance"
    VIEW_TEAM_HIERARCHY = "view_team_hierarchy"
    MANAGE_USERS = "manage_users"
    DELETE_USERS = "delete_users"
    EDIT_ANY_USER = "edit_any_user"
    MANAGE_DELEGATIONS = "manage_delegations"
    MANAGE_CAPACITY = "manage_capacity"
