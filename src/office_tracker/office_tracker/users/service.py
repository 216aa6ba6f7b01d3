from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty, require_text
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..delegations.repository import DelegationRepository
from . import permissions
from .hierarchy import build_team_hierarchy, reports_of
from .model import TeamHierarchy, User
from .repository import UserRepository
from .session import SessionContext

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate users and rebuild their session context."""

    def __init__(self, users: UserRepository, delegations: DelegationRepository):
        self._users = users
        self._delegations = delegations

    def authenticate(self, email: str, password: str) -> User:
        email = require_text(email or "", "Email")
        password = require_text(password or "", "Password")
        user = self._users.get_by_email(email.strip())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("user %s signed in", user.user_id)
        return user

    def load_context(self, user_id: int, *, today: Optional[date] = None) -> SessionContext:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Session expired, please sign in again")

        kwargs = {"today": today} if today else {}
        return SessionContext(user=user, delegations=tuple(self._delegations.list_all()), **kwargs)

    def change_password(self, context: SessionContext, *, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError("Please fill in all password fields")
        require_text(current_password, "Current password")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_id(context.user_id)
        if not user:
            raise NotFoundError("User not found")
        try:
            ok = check_password_hash(user.password_hash, current_password)
        except ValueError:
            ok = False
        if not ok:
            raise AuthenticationError("Current password is incorrect")

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("user %s changed password", user.user_id)


class UserService:
    """Use case: user directory, profile edits and tribe-lead user management."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self) -> Sequence[User]:
        return sorted(self._users.list_all(), key=permissions.role_sort_key)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def team_hierarchy(self, context: SessionContext) -> TeamHierarchy:
        if not permissions.can_view_team_hierarchy(context.user):
            raise AuthorizationError("Only leads can view the team hierarchy")
        return build_team_hierarchy(self._users.list_all())

    def my_team(self, context: SessionContext) -> dict:
        """The caller's chapter: lead plus reporters (a reporter sees their peers)."""

        users = list(self._users.list_all())
        user = context.user
        if user.role == Role.TRIBE_LEAD:
            return {"lead": user, "members": reports_of(user, users)}

        lead_id = user.user_id if user.role == Role.CHAPTER_LEAD else user.chapter_lead_id
        lead = next((u for u in users if u.user_id == lead_id), None)
        if lead is None:
            return {"lead": None, "members": [user]}
        return {"lead": lead, "members": reports_of(lead, users)}

    def direct_reports(self, context: SessionContext, user_id: int) -> list[User]:
        lead = self.get_user(user_id)
        if context.user_id != lead.user_id and not permissions.can_view_team_hierarchy(context.user):
            raise AuthorizationError("You can only list your own reports")
        return reports_of(lead, list(self._users.list_all()))

    def create_user(
        self,
        context: SessionContext,
        *,
        email: str,
        name: str,
        password: str,
        role: Role,
        chapter_lead_id: Optional[int] = None,
        team_name: Optional[str] = None,
    ) -> int:
        if not permissions.can_manage_users(context.user):
            raise AuthorizationError("Only the Tribe Lead can manage users")

        email = require_non_empty(email, "Email").lower()
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = Role(role)

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        if role == Role.TRIBE_LEAD:
            raise ValidationError("There can only be one Tribe Lead")

        if role == Role.REPORTER:
            if chapter_lead_id is None:
                raise ValidationError("A Reporter must have a Chapter Lead")
            lead = self._users.get_by_id(int(chapter_lead_id))
            if not lead or lead.role != Role.CHAPTER_LEAD:
                raise ValidationError("Chapter Lead does not exist")
            chapter_lead_id = lead.user_id
        else:
            chapter_lead_id = None

        user_id = self._users.create_user(
            email=email,
            name=name,
            password_hash=generate_password_hash(password),
            role=role,
            chapter_lead_id=chapter_lead_id,
            team_name=optional_text(team_name, "Team name"),
        )
        logger.info("user %s created %s %s", context.user_id, role.value, user_id)
        return user_id

    def update_profile(self, context: SessionContext, user_id: int, *, name: str, avatar: Optional[str] = None) -> User:
        if not permissions.can_edit_user(context.user, user_id):
            raise AuthorizationError("You can only edit your own profile")

        user = self.get_user(user_id)
        name = require_non_empty(name, "Name")
        self._users.update_profile(user.user_id, name=name, avatar=optional_text(avatar, "Avatar"))
        return self.get_user(user.user_id)

    def delete_user(self, context: SessionContext, user_id: int) -> None:
        if not permissions.can_delete_user(context.user):
            raise AuthorizationError("Only the Tribe Lead can delete users")

        user = self.get_user(user_id)
        if user.role == Role.TRIBE_LEAD:
            raise ValidationError("The Tribe Lead account cannot be deleted")
        if user.role == Role.CHAPTER_LEAD and any(
            u.chapter_lead_id == user.user_id for u in self._users.list_all()
        ):
            raise ValidationError("Reassign this Chapter Lead's reporters first")

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Failed to delete user")
        logger.info("user %s deleted user %s", context.user_id, user.user_id)

