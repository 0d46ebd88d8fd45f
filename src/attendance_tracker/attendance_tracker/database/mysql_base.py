from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageUnavailable
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Lock contention errors: the whole transaction can be re-run.
ER_LOCK_WAIT_TIMEOUT = 1205
ER_LOCK_DEADLOCK = 1213
# A plain INSERT of a document another transaction created first.
ER_DUP_ENTRY = 1062
RETRYABLE_ERRNOS = frozenset({ER_LOCK_WAIT_TIMEOUT, ER_LOCK_DEADLOCK, ER_DUP_ENTRY})


def _rollback_quietly(conn) -> None:
    # The connection may already be gone; the original error is what matters.
    try:
        conn.rollback()
    except mysql.connector.Error as e:
        logger.debug("rollback failed: %s", e)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, reraise_contention: bool = False):
    """Yield (conn, cursor); commit on success, roll back and re-raise otherwise.

    Driver errors leave as ``StorageUnavailable`` (keeping the original as
    ``__cause__``). With ``reraise_contention`` lock contention errors are
    re-raised as-is so the caller can re-run the whole transaction.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        _rollback_quietly(conn)
        if reraise_contention and getattr(e, "errno", None) in RETRYABLE_ERRNOS:
            raise
        logger.warning("database error: %s", e)
        raise StorageUnavailable("Database operation failed") from e
    except Exception:
        _rollback_quietly(conn)
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def decode_json(value: Any) -> Dict[str, Any]:
    """Normalize JSON column values across connector implementations.

    mysql-connector can return JSON as str, bytes/bytearray or an already
    decoded dict depending on version and C extension.
    """

    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        decoded = json.loads(value) if value.strip() else {}
        if not isinstance(decoded, dict):
            raise TypeError(f"Document body is not an object: {decoded!r}")
        return decoded
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def encode_json(fields: Dict[str, Any]) -> str:
    return json.dumps(fields, ensure_ascii=False, sort_keys=True)
