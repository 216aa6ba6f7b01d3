from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CapacitySetting
from .repository import CapacityRepository


def _to_setting(r: dict) -> CapacitySetting:
    return CapacitySetting(
        setting_id=int(r["setting_id"]),
        day_of_week=r["day_of_week"],
        capacity=int(r["capacity"]),
    )


class MySQLCapacityRepository(CapacityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_settings(self) -> Sequence[CapacitySetting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_id, day_of_week, capacity FROM office_capacity_settings")
            return [_to_setting(r) for r in fetchall(cur)]

    def upsert_setting(self, *, day_of_week: str, capacity: int) -> CapacitySetting:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO office_capacity_settings(day_of_week, capacity)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE capacity=VALUES(capacity)
                """,
                (day_of_week, int(capacity)),
            )
            cur.execute(
                "SELECT setting_id, day_of_week, capacity FROM office_capacity_settings WHERE day_of_week=%s",
                (day_of_week,),
            )
            return _to_setting(fetchone(cur))
