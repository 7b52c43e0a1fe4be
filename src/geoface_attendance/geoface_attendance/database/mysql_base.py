from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StorageUnavailable
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One transaction: commit on success, roll back on any error.

    Driver failures other than integrity violations surface as
    ``StorageUnavailable``; integrity errors are left for the repository to
    interpret (e.g. duplicate (user, day) rows).
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("Could not obtain a database connection: %s", exc)
        raise StorageUnavailable("Attendance storage is unavailable") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError:
        _safe_rollback(conn)
        raise
    except mysql.connector.Error as exc:
        _safe_rollback(conn)
        logger.error("Database error, transaction rolled back: %s", exc)
        raise StorageUnavailable("Attendance storage is unavailable") from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error as exc:
        logger.warning("Rollback failed: %s", exc)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
