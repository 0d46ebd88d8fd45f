from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Sequence, TypeVar

import mysql.connector

from ..core.exceptions import StorageUnavailable
from .connection import DatabaseConnection
from .document_store import Document, split_path
from .mysql_base import RETRYABLE_ERRNOS, db_cursor, decode_json, encode_json, fetchall, fetchone

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5


def _list_sql(
    *,
    start_at: Optional[str],
    end_at: Optional[str],
    descending: bool,
    limit: Optional[int],
    for_update: bool,
) -> tuple[str, list[object]]:
    clauses = ["collection=%s"]
    params: list[object] = []
    if start_at is not None:
        clauses.append("doc_id >= %s")
        params.append(start_at)
    if end_at is not None:
        clauses.append("doc_id <= %s")
        params.append(end_at)

    sql = f"""
        SELECT path, doc_id, data
        FROM documents
        WHERE {" AND ".join(clauses)}
        ORDER BY doc_id {"DESC" if descending else "ASC"}
    """
    if limit is not None:
        sql += " LIMIT %s"
        params.append(int(limit))
    if for_update:
        sql += " FOR UPDATE"
    return sql, params


def _to_document(r: Dict[str, Any]) -> Document:
    return Document(path=r["path"], doc_id=r["doc_id"], data=decode_json(r.get("data")))


def _insert(cur, path: str, fields: Dict[str, Any]) -> None:
    collection, doc_id = split_path(path)
    cur.execute(
        "INSERT INTO documents(path, collection, doc_id, data) VALUES(%s,%s,%s,%s)",
        (path, collection, doc_id, encode_json(fields)),
    )


def _upsert(cur, path: str, fields: Dict[str, Any]) -> None:
    collection, doc_id = split_path(path)
    cur.execute(
        """
        INSERT INTO documents(path, collection, doc_id, data)
        VALUES(%s,%s,%s,%s)
        ON DUPLICATE KEY UPDATE data=VALUES(data)
        """,
        (path, collection, doc_id, encode_json(fields)),
    )


class MySQLDocumentStore:
    """Document store backed by one MySQL ``documents`` table (see database/schema.sql)."""

    def __init__(self, conn_factory: DatabaseConnection, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self._conn_factory = conn_factory
        self._max_attempts = max(1, int(max_attempts))

    def get(self, path: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT path, doc_id, data FROM documents WHERE path=%s", (path,))
            r = fetchone(cur)
            return _to_document(r) if r else None

    def set(self, path: str, fields: Dict[str, Any], *, merge: bool = False) -> None:
        if merge:
            self.run_transaction(lambda tx: tx.set(path, fields, merge=True))
            return
        with db_cursor(self._conn_factory) as (_, cur):
            _upsert(cur, path, fields)

    def delete(self, path: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM documents WHERE path=%s", (path,))

    def list(
        self,
        collection: str,
        *,
        start_at: Optional[str] = None,
        end_at: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        sql, params = _list_sql(
            start_at=start_at, end_at=end_at, descending=descending, limit=limit, for_update=False
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (collection, *params))
            return [_to_document(r) for r in fetchall(cur)]

    def run_transaction(self, fn: Callable[["_MySQLTransaction"], T]) -> T:
        """Run ``fn`` inside one InnoDB transaction.

        Reads lock what they touch (``FOR UPDATE``). When two transactions
        race for the same rows InnoDB aborts one of them (deadlock, lock
        wait timeout, or a duplicate key when both create the same document
        under READ COMMITTED); that one is re-run from scratch (up to
        ``max_attempts``) and then observes the winner's writes.
        """

        last_error: Optional[Exception] = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                with db_cursor(self._conn_factory, reraise_contention=True) as (_, cur):
                    return fn(_MySQLTransaction(cur))
            except mysql.connector.Error as e:
                if getattr(e, "errno", None) not in RETRYABLE_ERRNOS:
                    raise
                last_error = e
                logger.debug("transaction contention (attempt %s/%s): %s", attempt, self._max_attempts, e)

        logger.warning("transaction abandoned after %s attempts: %s", self._max_attempts, last_error)
        raise StorageUnavailable("Database is busy") from last_error


class _MySQLTransaction:
    """Reads lock what they find. A document read as missing is created with a
    plain INSERT, so a concurrent creator surfaces as a duplicate key and the
    transaction is re-run instead of silently overwriting the winner.
    """

    def __init__(self, cur):
        self._cur = cur
        self._seen_missing: set[str] = set()

    def get(self, path: str) -> Optional[Document]:
        self._cur.execute("SELECT path, doc_id, data FROM documents WHERE path=%s FOR UPDATE", (path,))
        r = fetchone(self._cur)
        if not r:
            self._seen_missing.add(path)
            return None
        return _to_document(r)

    def set(self, path: str, fields: Dict[str, Any], *, merge: bool = False) -> None:
        if merge:
            current = self.get(path)
            if current is not None:
                merged = dict(current.data)
                merged.update(fields)
                fields = merged
        if path in self._seen_missing:
            _insert(self._cur, path, fields)
            self._seen_missing.discard(path)
            return
        _upsert(self._cur, path, fields)

    def delete(self, path: str) -> None:
        self._seen_missing.discard(path)
        self._cur.execute("DELETE FROM documents WHERE path=%s", (path,))

    def list(
        self,
        collection: str,
        *,
        start_at: Optional[str] = None,
        end_at: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        sql, params = _list_sql(
            start_at=start_at, end_at=end_at, descending=descending, limit=limit, for_update=True
        )
        self._cur.execute(sql, (collection, *params))
        return [_to_document(r) for r in fetchall(self._cur)]
