from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Delegation


class DelegationRepository(Protocol):
    def get_by_id(self, delegation_id: int) -> Optional[Delegation]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Delegation]:
        raise NotImplementedError

    def create(self, *, delegator_id: int, delegate_id: int, start_date: date, end_date: date) -> int:
        """Insert an active delegation and return its id."""

        raise NotImplementedError

    def set_active(self, delegation_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
