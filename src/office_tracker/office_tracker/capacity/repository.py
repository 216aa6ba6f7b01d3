from __future__ import annotations

from typing import Protocol, Sequence

from .model import CapacitySetting


class CapacityRepository(Protocol):
    def list_settings(self) -> Sequence[CapacitySetting]:
        raise NotImplementedError

    def upsert_setting(self, *, day_of_week: str, capacity: int) -> CapacitySetting:
        raise NotImplementedError
