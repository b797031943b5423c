from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def _rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error as exc:
        # The connection is usually already gone when this happens.
        logger.warning("rollback failed: %s", exc)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection + transaction per block; commits on success.

    Integrity errors propagate unchanged (repositories translate them);
    every other driver error becomes StoreUnavailableError.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.warning("database connect failed: %s", exc)
        raise StoreUnavailableError("Storage is temporarily unavailable, please try again") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError:
        _rollback(conn)
        raise
    except mysql.connector.Error as exc:
        _rollback(conn)
        logger.warning("database operation failed: %s", exc)
        raise StoreUnavailableError("Storage is temporarily unavailable, please try again") from exc
    except Exception:
        _rollback(conn)
        raise
    finally:
        conn.close()


def is_duplicate_key(exc: mysql.connector.IntegrityError) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
