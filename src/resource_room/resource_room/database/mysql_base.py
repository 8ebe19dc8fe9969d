from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateEntity, PersistenceError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def translate_error(exc: mysql.connector.Error) -> Exception:
    """Map a driver error onto the domain taxonomy."""
    if getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY:
        return DuplicateEntity(getattr(exc, "msg", None) or str(exc))
    return PersistenceError(f"Database error: {getattr(exc, 'msg', None) or exc}")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cur)`` inside one transaction.

    Commits on success, rolls back on any error. Driver errors leave this
    block as ``DuplicateEntity`` or ``PersistenceError``.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("Cannot connect to MySQL: %s", exc)
        raise translate_error(exc) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise translate_error(exc) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def load_json_list(value: Any) -> List[str]:
    """Normalize a MySQL JSON column holding a list of strings.

    mysql-connector can return JSON as:
    - str
    - bytes / bytearray
    - an already decoded list (C extension with converters)
    """

    if value is None:
        return []
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return []
        value = json.loads(value)
    if not isinstance(value, list):
        raise TypeError(f"Unsupported JSON list value: {value!r}")
    return [str(v) for v in value if v is not None]


def placeholders(count: int) -> str:
    return ",".join(["%s"] * count)
