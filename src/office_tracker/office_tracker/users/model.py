from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, holds no DB access code. ``role`` is fixed for the
    lifetime of a loaded snapshot.
    """

    user_id: int
    email: str
    name: str
    role: Role
    chapter_lead_id: Optional[int] = None
    team_name: Optional[str] = None
    avatar: Optional[str] = None
    is_first_login: bool = False
    created_at: Optional[datetime] = None
    password_hash: str = field(default="", repr=False)

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "chapterLeadId": self.chapter_lead_id,
            "teamName": self.team_name,
            "avatar": self.avatar,
            "isFirstLogin": self.is_first_login,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ChapterTeam:
    """A chapter lead and the reporters pointing at them."""

    chapter_lead: User
    reporters: tuple[User, ...] = ()

    @property
    def member_ids(self) -> frozenset[int]:
        return frozenset([self.chapter_lead.user_id, *(r.user_id for r in self.reporters)])


@dataclass(frozen=True)
class TeamHierarchy:
    """Read-model: TribeLead -> ChapterLeads -> Reporters. Never persisted."""

    tribe_lead: Optional[User]
    chapters: tuple[ChapterTeam, ...] = ()
    unassigned: tuple[User, ...] = ()

    def team_of(self, chapter_lead_id: int) -> Optional[ChapterTeam]:
        for chapter in self.chapters:
            if chapter.chapter_lead.user_id == chapter_lead_id:
                return chapter
        return None

    def to_dict(self) -> dict:
        return {
            "tribeLead": self.tribe_lead.to_dict() if self.tribe_lead else None,
            "chapters": [
                {
                    "chapterLead": c.chapter_lead.to_dict(),
                    "reporters": [r.to_dict() for r in c.reporters],
                }
                for c in self.chapters
            ],
            "unassigned": [u.to_dict() for u in self.unassigned],
        }
