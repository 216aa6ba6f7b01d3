from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..common.datetime_utils import today_local
from ..core.enums import Permission
from ..core.exceptions import AuthorizationError
from ..delegations.engine import effective_permissions
from ..delegations.model import Delegation
from .model import User


@dataclass(frozen=True)
class SessionContext:
    """Everything a service needs to know about the caller.

    Built once per request and passed explicitly to every service call.
    """

    user: User
    delegations: tuple[Delegation, ...] = ()
    today: date = field(default_factory=today_local)

    @property
    def user_id(self) -> int:
        return self.user.user_id

    @property
    def permissions(self) -> frozenset[Permission]:
        return effective_permissions(self.user, self.delegations, as_of=self.today)

    def has(self, permission: Permission) -> bool:
        return permission in self.permissions

    def require(self, permission: Permission, message: str = "You do not have permission for this action") -> None:
        if not self.has(permission):
            raise AuthorizationError(message)
