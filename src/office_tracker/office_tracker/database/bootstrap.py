from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import WORKDAY_NAMES
from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\":
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


def ensure_demo_users(db_config: dict, *, default_capacity: int = 10) -> None:
    """Seed one tribe, two chapters and weekday capacities. Safe to re-run."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(DEMO_PASSWORD)

        def upsert_user(email: str, name: str, role: str, chapter_lead_id=None, team_name=None) -> int:
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET name=%s, role=%s, chapter_lead_id=%s, team_name=%s WHERE user_id=%s",
                    (name, role, chapter_lead_id, team_name, existing["user_id"]),
                )
                return int(existing["user_id"])
            cur.execute(
                """
                INSERT INTO users (email, name, password_hash, role, chapter_lead_id, team_name)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (email, name, password_hash, role, chapter_lead_id, team_name),
            )
            return int(cur.lastrowid)

        upsert_user("tribe.lead@example.com", "Tessa Tribe", "TRIBE_LEAD")
        platform = upsert_user("platform.lead@example.com", "Carl Chapter", "CHAPTER_LEAD", team_name="Platform")
        mobile = upsert_user("mobile.lead@example.com", "Mona Chapter", "CHAPTER_LEAD", team_name="Mobile")
        upsert_user("ravi@example.com", "Ravi Reporter", "REPORTER", platform, "Platform")
        upsert_user("rita@example.com", "Rita Reporter", "REPORTER", platform, "Platform")
        upsert_user("milo@example.com", "Milo Reporter", "REPORTER", mobile, "Mobile")

        for day in WORKDAY_NAMES:
            cur.execute(
                """
                INSERT INTO office_capacity_settings (day_of_week, capacity) VALUES (%s, %s)
                ON DUPLICATE KEY UPDATE capacity=capacity
                """,
                (day, int(default_capacity)),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo users ready (password: %s)", DEMO_PASSWORD)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
