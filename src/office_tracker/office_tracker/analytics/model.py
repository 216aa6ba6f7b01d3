from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AnalyticsScope:
    """Which users a report covers. The first explicit selector set wins."""

    user_id: Optional[int] = None
    chapter_lead_id: Optional[int] = None
    everyone: bool = False


@dataclass(frozen=True)
class ResolvedScope:
    kind: str
    member_ids: frozenset[int]
    label: str

    def to_dict(self) -> dict:
        return {"kind": self.kind, "label": self.label, "userCount": len(self.member_ids)}


@dataclass(frozen=True)
class AnalyticsOverview:
    total_users: int
    average_occupancy: int
    most_popular_day: Optional[str]
    remote_work_rate: int

    def to_dict(self) -> dict:
        return {
            "totalUsers": self.total_users,
            "averageOccupancy": self.average_occupancy,
            "mostPopularDay": self.most_popular_day,
            "remoteWorkRate": self.remote_work_rate,
        }


@dataclass(frozen=True)
class AnalyticsReport:
    start: date
    end: date
    scope: ResolvedScope
    occupancy_data: list[dict] = field(default_factory=list)
    weekly_pattern: list[dict] = field(default_factory=list)
    status_distribution: list[dict] = field(default_factory=list)
    overview: Optional[AnalyticsOverview] = None

    def to_dict(self) -> dict:
        return {
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "scope": self.scope.to_dict(),
            "occupancyData": self.occupancy_data,
            "weeklyPattern": self.weekly_pattern,
            "statusDistribution": self.status_distribution,
            "overview": self.overview.to_dict() if self.overview else None,
        }


@dataclass(frozen=True)
class PersonalStats:
    user_id: int
    month: str
    office_days: int
    current_streak: int
    attendance_rate: int

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "month": self.month,
            "officeDays": self.office_days,
            "currentStreak": self.current_streak,
            "attendanceRate": self.attendance_rate,
        }
