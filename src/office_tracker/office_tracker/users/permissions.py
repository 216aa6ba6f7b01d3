"""Role model: permission predicates over an acting user.

All predicates are pure functions of their arguments. Delegated admin access
is the only permission that depends on data beyond the user's own role.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.enums import Permission, Role
from .model import User

ROLE_RANK = {
    Role.REPORTER: 0,
    Role.CHAPTER_LEAD: 1,
    Role.TRIBE_LEAD: 2,
}

ROLE_DISPLAY_NAMES = {
    Role.REPORTER: "Reporter",
    Role.CHAPTER_LEAD: "Chapter Lead",
    Role.TRIBE_LEAD: "Tribe Lead",
}

_LEAD_PERMISSIONS = frozenset(
    {
        Permission.VIEW_ANALYTICS,
        Permission.ALLOCATE_ATTENDANCE,
        Permission.VIEW_TEAM_HIERARCHY,
    }
)

# What an active delegation lends to a chapter lead.
ADMIN_PERMISSIONS = frozenset({Permission.ACCESS_ADMIN, Permission.MANAGE_CAPACITY})

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.REPORTER: frozenset(),
    Role.CHAPTER_LEAD: _LEAD_PERMISSIONS,
    Role.TRIBE_LEAD: _LEAD_PERMISSIONS
    | ADMIN_PERMISSIONS
    | {
        Permission.MANAGE_USERS,
        Permission.DELETE_USERS,
        Permission.EDIT_ANY_USER,
        Permission.MANAGE_DELEGATIONS,
    },
}


def role_permissions(role: Role) -> frozenset[Permission]:
    return ROLE_PERMISSIONS[Role(role)]


def role_display_name(role: Role) -> str:
    return ROLE_DISPLAY_NAMES[Role(role)]


def role_sort_key(user: User) -> tuple[int, str]:
    """Highest role first, then by name."""
    return -ROLE_RANK[user.role], user.name.lower()


def can_access_admin(user: User, delegations: Iterable = (), *, as_of: Optional[date] = None) -> bool:
    if user.role == Role.TRIBE_LEAD:
        return True
    # Imported here: the delegation engine depends on this module.
    from ..delegations.engine import has_active_delegation

    return has_active_delegation(user.user_id, delegations, as_of=as_of)


def can_view_analytics(user: User) -> bool:
    return Permission.VIEW_ANALYTICS in role_permissions(user.role)


def can_allocate_attendance(user: User) -> bool:
    return Permission.ALLOCATE_ATTENDANCE in role_permissions(user.role)


def can_view_team_hierarchy(user: User) -> bool:
    return Permission.VIEW_TEAM_HIERARCHY in role_permissions(user.role)


def can_edit_user(actor: User, target_user_id: int) -> bool:
    return actor.user_id == int(target_user_id) or Permission.EDIT_ANY_USER in role_permissions(actor.role)


def can_manage_users(user: User) -> bool:
    return Permission.MANAGE_USERS in role_permissions(user.role)


def can_delete_user(user: User) -> bool:
    return Permission.DELETE_USERS in role_permissions(user.role)
