"""Team hierarchy projection over a list of users."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from .model import ChapterTeam, TeamHierarchy, User


def build_team_hierarchy(users: Iterable[User]) -> TeamHierarchy:
    """Group reporters under their chapter lead; rebuilt on every call."""

    users = list(users)
    tribe_lead: Optional[User] = None
    leads: list[User] = []
    reporters_by_lead: dict[int, list[User]] = {}
    unassigned: list[User] = []

    for u in users:
        if u.role == Role.TRIBE_LEAD:
            tribe_lead = u
        elif u.role == Role.CHAPTER_LEAD:
            leads.append(u)

    lead_ids = {lead.user_id for lead in leads}
    for u in users:
        if u.role != Role.REPORTER:
            continue
        if u.chapter_lead_id in lead_ids:
            reporters_by_lead.setdefault(u.chapter_lead_id, []).append(u)
        else:
            unassigned.append(u)

    leads.sort(key=lambda x: x.name.lower())
    chapters = tuple(
        ChapterTeam(
            chapter_lead=lead,
            reporters=tuple(sorted(reporters_by_lead.get(lead.user_id, []), key=lambda x: x.name.lower())),
        )
        for lead in leads
    )
    return TeamHierarchy(tribe_lead=tribe_lead, chapters=chapters, unassigned=tuple(unassigned))


def reports_of(lead: User, users: Sequence[User]) -> list[User]:
    """Direct and transitive reports of ``lead`` (never ``lead`` itself)."""

    if lead.role == Role.TRIBE_LEAD:
        return [u for u in users if u.user_id != lead.user_id]
    if lead.role == Role.CHAPTER_LEAD:
        return [u for u in users if u.role == Role.REPORTER and u.chapter_lead_id == lead.user_id]
    return []


def is_report_of(lead: User, target: User) -> bool:
    if target.user_id == lead.user_id:
        return False
    if lead.role == Role.TRIBE_LEAD:
        return True
    if lead.role == Role.CHAPTER_LEAD:
        return target.role == Role.REPORTER and target.chapter_lead_id == lead.user_id
    return False


def team_member_ids(user: User, users: Sequence[User]) -> frozenset[int]:
    """The user's own team: their chapter lead plus that lead's reporters.

    A tribe lead's team is the whole organisation.
    """

    if user.role == Role.TRIBE_LEAD:
        return frozenset(u.user_id for u in users)

    lead_id = user.user_id if user.role == Role.CHAPTER_LEAD else user.chapter_lead_id
    if lead_id is None:
        return frozenset([user.user_id])

    ids = {lead_id}
    ids.update(u.user_id for u in users if u.role == Role.REPORTER and u.chapter_lead_id == lead_id)
    return frozenset(ids)
