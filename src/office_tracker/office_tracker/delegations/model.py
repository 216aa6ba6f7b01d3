from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Delegation:
    """Time-bounded grant of tribe-lead admin access to a chapter lead.

    Revoking flips ``is_active``; rows are never deleted so history survives.
    """

    delegation_id: int
    delegator_id: int
    delegate_id: int
    start_date: date
    end_date: date
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.delegation_id,
            "delegatorId": self.delegator_id,
            "delegateId": self.delegate_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "isActive": self.is_active,
        }
