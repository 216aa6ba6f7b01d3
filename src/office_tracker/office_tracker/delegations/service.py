from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import DateLike, normalize_date
from ..common.validators import require_date_order
from ..core.enums import Permission, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..users.session import SessionContext
from .engine import active_delegations_for
from .model import Delegation
from .repository import DelegationRepository

logger = logging.getLogger(__name__)


class DelegationService:
    """Use case: the Tribe Lead lends admin access to chapter leads."""

    def __init__(self, delegations: DelegationRepository, users: UserRepository):
        self._delegations = delegations
        self._users = users

    def create_delegation(
        self,
        context: SessionContext,
        *,
        delegate_id: int,
        start_date: DateLike,
        end_date: DateLike,
    ) -> Delegation:
        if context.user.role != Role.TRIBE_LEAD:
            logger.warning("user %s tried to create a delegation", context.user_id)
            raise AuthorizationError("Only the Tribe Lead can delegate admin rights")

        start = normalize_date(start_date)
        end = normalize_date(end_date)

        if int(delegate_id) == context.user_id:
            raise ValidationError("You cannot delegate to yourself")

        delegate = self._users.get_by_id(int(delegate_id))
        if not delegate:
            raise NotFoundError("Delegate not found")
        if delegate.role != Role.CHAPTER_LEAD:
            raise ValidationError("Admin rights can only be delegated to a Chapter Lead")
        require_date_order(start, end, strict=True)

        delegation_id = self._delegations.create(
            delegator_id=context.user_id,
            delegate_id=delegate.user_id,
            start_date=start,
            end_date=end,
        )
        logger.info(
            "delegation %s: %s -> %s (%s..%s)", delegation_id, context.user_id, delegate.user_id, start, end
        )
        return Delegation(
            delegation_id=delegation_id,
            delegator_id=context.user_id,
            delegate_id=delegate.user_id,
            start_date=start,
            end_date=end,
            is_active=True,
        )

    def revoke(self, context: SessionContext, delegation_id: int) -> None:
        """Deactivate a delegation. Revoking an inactive one is a no-op."""

        context.require(Permission.MANAGE_DELEGATIONS, "Only the Tribe Lead can revoke delegations")

        delegation = self._delegations.get_by_id(int(delegation_id))
        if not delegation:
            raise NotFoundError("Delegation not found")
        if not delegation.is_active:
            return

        self._delegations.set_active(delegation.delegation_id, is_active=False)
        logger.info("delegation %s revoked by %s", delegation.delegation_id, context.user_id)

    def list_delegations(self, context: SessionContext) -> Sequence[Delegation]:
        rows = self._delegations.list_all()
        if context.has(Permission.MANAGE_DELEGATIONS):
            return list(rows)
        return [d for d in rows if context.user_id in (d.delegate_id, d.delegator_id)]

    def active_delegation_for(self, user_id: int, *, as_of: Optional[date] = None) -> Optional[Delegation]:
        active = active_delegations_for(user_id, self._delegations.list_all(), as_of=as_of)
        # Latest-ending grant first when several overlap.
        active.sort(key=lambda d: d.end_date, reverse=True)
        return active[0] if active else None
