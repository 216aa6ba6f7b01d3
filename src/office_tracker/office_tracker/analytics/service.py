from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional, Sequence

from ..attendance.model import AttendanceFilter
from ..attendance.repository import AttendanceRepository
from ..attendance.service import dedupe_by_day
from ..common.datetime_utils import DateLike, month_bounds, normalize_date
from ..common.validators import require_date_order
from ..core.constants import DEFAULT_ANALYTICS_DAYS, STREAK_LOOKBACK_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users import permissions
from ..users.hierarchy import is_report_of, team_member_ids
from ..users.model import User
from ..users.repository import UserRepository
from ..users.session import SessionContext
from . import aggregator
from .model import AnalyticsReport, AnalyticsScope, PersonalStats, ResolvedScope

logger = logging.getLogger(__name__)


def resolve_scope(user: User, users: Sequence[User], scope: Optional[AnalyticsScope] = None) -> ResolvedScope:
    """Pick the users a report covers.

    Precedence: explicit user > explicit chapter lead > everyone > the caller's
    own role scope. Tribe leads may pick anything, chapter leads stay inside
    their own team, and reporters without analytics access get only their
    team view or their own user.
    """

    scope = scope or AnalyticsScope()
    if not permissions.can_view_analytics(user):
        picks_other = scope.user_id is not None and int(scope.user_id) != user.user_id
        if picks_other or scope.chapter_lead_id is not None or scope.everyone:
            raise AuthorizationError("Only leads can choose an analytics scope")

    by_id = {u.user_id: u for u in users}
    visible = team_member_ids(user, users)

    if scope.user_id is not None:
        target = by_id.get(int(scope.user_id))
        if not target:
            raise NotFoundError("User not found")
        if target.user_id not in visible:
            raise AuthorizationError("You can only view analytics for your own team")
        return ResolvedScope(kind="user", member_ids=frozenset([target.user_id]), label=target.name)

    if scope.chapter_lead_id is not None:
        lead = by_id.get(int(scope.chapter_lead_id))
        if not lead:
            raise NotFoundError("Chapter Lead not found")
        if lead.role != Role.CHAPTER_LEAD:
            raise ValidationError("Selected user is not a Chapter Lead")
        members = team_member_ids(lead, users)
        if not members <= visible:
            raise AuthorizationError("You can only view analytics for your own team")
        return ResolvedScope(kind="chapter", member_ids=members, label=lead.team_name or f"{lead.name}'s team")

    if scope.everyone or user.role == Role.TRIBE_LEAD:
        if user.role != Role.TRIBE_LEAD:
            raise AuthorizationError("Only the Tribe Lead can view organisation analytics")
        return ResolvedScope(kind="organization", member_ids=frozenset(by_id), label="Organization")

    return ResolvedScope(kind="team", member_ids=visible, label="My team")


class AnalyticsService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def compute_analytics(
        self,
        context: SessionContext,
        *,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        scope: Optional[AnalyticsScope] = None,
    ) -> AnalyticsReport:
        end = normalize_date(end_date) if end_date else context.today
        start = normalize_date(start_date) if start_date else end - timedelta(days=DEFAULT_ANALYTICS_DAYS - 1)
        require_date_order(start, end)

        users = list(self._users.list_all())
        resolved = resolve_scope(context.user, users, scope)

        query = AttendanceFilter(
            user_id=next(iter(resolved.member_ids)) if resolved.kind == "user" else None,
            start_date=start,
            end_date=end,
        )
        records = aggregator.scoped_records(
            dedupe_by_day(self._attendance.list_records(query)), start, end, resolved.member_ids
        )
        logger.debug("analytics %s %s..%s: %d records", resolved.kind, start, end, len(records))

        return AnalyticsReport(
            start=start,
            end=end,
            scope=resolved,
            occupancy_data=aggregator.occupancy_data(records, start, end),
            weekly_pattern=aggregator.weekly_pattern(records, start, end),
            status_distribution=aggregator.status_distribution(records),
            overview=aggregator.overview(records, start, end, total_users=len(resolved.member_ids)),
        )

    def compute_personal_stats(
        self,
        context: SessionContext,
        *,
        user_id: Optional[int] = None,
        month: Optional[DateLike] = None,
    ) -> PersonalStats:
        target_id = context.user_id if user_id is None else int(user_id)
        if target_id != context.user_id:
            target = self._users.get_by_id(target_id)
            if not target:
                raise NotFoundError("User not found")
            if not is_report_of(context.user, target):
                raise AuthorizationError("You can only view statistics for yourself or your reports")

        today = context.today
        if isinstance(month, str) and len(month.strip()) == 7:
            month = f"{month.strip()}-01"
        month_day = normalize_date(month) if month else today
        month_start, month_end = month_bounds(month_day)
        period_end = min(today, month_end)
        # The streak may reach back into the previous month.
        fetch_start = min(month_start, period_end - timedelta(days=STREAK_LOOKBACK_DAYS))

        records = dedupe_by_day(
            self._attendance.list_records(AttendanceFilter(user_id=target_id, start_date=fetch_start, end_date=period_end))
        )
        return aggregator.personal_stats(records, target_id, today=today, month=month_day)
