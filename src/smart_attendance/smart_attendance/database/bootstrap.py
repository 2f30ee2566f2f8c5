from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)

# (full_name, email, password, role)
DEMO_ACCOUNTS = (
    ("Admin User", "admin@smartattendance.com", "admin123", "admin"),
    ("Lecturer User", "lecturer@smartattendance.com", "lecturer123", "lecturer"),
    ("Student User", "student@smartattendance.com", "student123", "student"),
)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "smart_attendance")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


_DB_SCOPED_LINE = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE\b|USE\b|--).*$")


def _load_schema_sql(schema_path: Union[str, Path]) -> str:
    # CREATE DATABASE / USE lines are dropped so the configured database name wins.
    return _DB_SCOPED_LINE.sub("", Path(schema_path).read_text(encoding="utf-8"))


def _iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema script on top-level ``;``, ignoring ones inside quoted literals."""

    start = 0
    quote: Optional[str] = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    ensure_database_exists(db_config)

    sql = _load_schema_sql(schema_path)
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_users(db_config: dict) -> int:
    """Insert the demo admin/lecturer/student accounts that are missing.

    Existing accounts are left untouched. Returns how many were created.
    """

    conn = _connect(_as_target(db_config))
    created = 0
    try:
        cur = conn.cursor(dictionary=True)
        for full_name, email, password, role in DEMO_ACCOUNTS:
            cur.execute("SELECT account_id FROM accounts WHERE email=%s", (email,))
            if cur.fetchone():
                logger.info("Demo account already exists: %s", email)
                continue
            cur.execute(
                """
                INSERT INTO accounts (full_name, email, password_hash, role, is_active)
                VALUES (%s, %s, %s, %s, 1)
                """,
                (full_name, email, generate_password_hash(password), role),
            )
            created += 1
            logger.info("Created demo %s: %s", role, email)
        conn.commit()
    finally:
        conn.close()
    return created


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
