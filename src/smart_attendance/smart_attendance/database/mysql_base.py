from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateError, StorageTimeout, StorageUnavailable
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# CR_SERVER_LOST / CR_SERVER_GONE_ERROR / ER_QUERY_TIMEOUT / ER_LOCK_WAIT_TIMEOUT
TIMEOUT_ERRNOS = {2013, 2006, 3024, errorcode.ER_LOCK_WAIT_TIMEOUT}


def translate_mysql_error(exc: mysql.connector.Error) -> Exception:
    """Map a driver error to the domain taxonomy without leaking its detail."""

    if getattr(exc, "errno", None) in TIMEOUT_ERRNOS:
        return StorageTimeout()
    return StorageUnavailable()


@contextmanager
def db_cursor(
    conn_factory: DatabaseConnection,
    *,
    dictionary: bool = True,
    duplicate: Optional[Type[DuplicateError]] = None,
) -> Iterator[tuple]:
    """Yield ``(conn, cursor)`` for one unit of work.

    The unit is committed only if the block finishes; any error rolls it back.
    A unique-key violation is raised as ``duplicate`` when one is given.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("MySQL connect failed: %s", exc)
        raise translate_mysql_error(exc) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as exc:
        _safe_rollback(conn)
        if duplicate is not None and exc.errno == errorcode.ER_DUP_ENTRY:
            raise duplicate() from exc
        logger.error("MySQL integrity error: %s", exc)
        raise StorageUnavailable() from exc
    except mysql.connector.Error as exc:
        _safe_rollback(conn)
        logger.error("MySQL error: %s", exc)
        raise translate_mysql_error(exc) from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error as exc:
        logger.warning("MySQL rollback failed: %s", exc)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
