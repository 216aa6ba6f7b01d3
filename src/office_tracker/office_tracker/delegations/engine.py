"""Pure delegation rules: activity window and effective permissions."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import today_local
from ..core.enums import Permission
from ..users.model import User
from ..users.permissions import ADMIN_PERMISSIONS, role_permissions
from .model import Delegation


def is_active_delegation(delegation: Delegation, as_of: Optional[date] = None) -> bool:
    as_of = as_of or today_local()
    return bool(delegation.is_active) and delegation.start_date <= as_of <= delegation.end_date


def active_delegations_for(user_id: int, delegations: Iterable[Delegation], *, as_of: Optional[date] = None) -> list[Delegation]:
    return [d for d in delegations if d.delegate_id == int(user_id) and is_active_delegation(d, as_of)]


def has_active_delegation(user_id: int, delegations: Iterable[Delegation], *, as_of: Optional[date] = None) -> bool:
    return bool(active_delegations_for(user_id, delegations, as_of=as_of))


def effective_permissions(
    user: User,
    delegations: Iterable[Delegation] = (),
    *,
    as_of: Optional[date] = None,
) -> frozenset[Permission]:
    """Role permissions plus borrowed admin access while a delegation is live.

    The user's role is untouched: a delegate is still listed as a chapter lead
    and keeps a chapter lead's allocation scope.
    """

    permissions = role_permissions(user.role)
    if has_active_delegation(user.user_id, delegations, as_of=as_of):
        permissions = permissions | ADMIN_PERMISSIONS
    return frozenset(permissions)
