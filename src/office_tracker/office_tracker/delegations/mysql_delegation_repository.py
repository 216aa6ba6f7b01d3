from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Delegation
from .repository import DelegationRepository


def _to_delegation(r: dict) -> Delegation:
    return Delegation(
        delegation_id=int(r["delegation_id"]),
        delegator_id=int(r["delegator_id"]),
        delegate_id=int(r["delegate_id"]),
        start_date=normalize_mysql_date(r["start_date"]),
        end_date=normalize_mysql_date(r["end_date"]),
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
    )


class MySQLDelegationRepository(DelegationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, delegation_id: int) -> Optional[Delegation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT delegation_id, delegator_id, delegate_id, start_date, end_date, is_active, created_at
                FROM delegations
                WHERE delegation_id=%s
                """,
                (int(delegation_id),),
            )
            r = fetchone(cur)
            return _to_delegation(r) if r else None

    def list_all(self) -> Sequence[Delegation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT delegation_id, delegator_id, delegate_id, start_date, end_date, is_active, created_at
                FROM delegations
                ORDER BY start_date DESC, delegation_id DESC
                """
            )
            return [_to_delegation(r) for r in fetchall(cur)]

    def create(self, *, delegator_id: int, delegate_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO delegations(delegator_id, delegate_id, start_date, end_date, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (int(delegator_id), int(delegate_id), start_date, end_date),
            )
            return int(cur.lastrowid)

    def set_active(self, delegation_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE delegations SET is_active=%s WHERE delegation_id=%s",
                (1 if is_active else 0, int(delegation_id)),
            )
            return cur.rowcount > 0
