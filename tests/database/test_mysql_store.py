from __future__ import annotations

import mysql.connector
import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import StorageUnavailable
from src.attendance_tracker.attendance_tracker.database.mysql_base import ER_DUP_ENTRY, ER_LOCK_DEADLOCK, decode_json
from src.attendance_tracker.attendance_tracker.database.mysql_store import MySQLDocumentStore


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self._rows = []

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), tuple(params)))
        if self._conn.failures:
            raise self._conn.failures.pop(0)
        if sql.lstrip().startswith("INSERT") and self._conn.shared.created_elsewhere:
            # another transaction committed the same document first
            self._conn.rows.append(self._conn.shared.created_elsewhere.pop(0))
            raise mysql.connector.errors.IntegrityError(msg="Duplicate entry", errno=ER_DUP_ENTRY)
        if sql.lstrip().startswith("SELECT"):
            self._rows = list(self._conn.rows)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, shared):
        self._shared = shared
        self.shared = shared
        self.executed = shared.executed
        self.failures = shared.failures
        self.rows = shared.rows

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self._shared.commits += 1

    def rollback(self):
        self._shared.rollbacks += 1

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, *, rows=(), failures=(), created_elsewhere=()):
        self.rows = list(rows)
        self.failures = list(failures)
        self.created_elsewhere = list(created_elsewhere)
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    def connect(self):
        return FakeConnection(self)


def _deadlock():
    return mysql.connector.errors.DatabaseError(msg="Deadlock found", errno=ER_LOCK_DEADLOCK)


def test_get_decodes_json_rows():
    factory = FakeConnectionFactory(rows=[{"path": "c/d", "doc_id": "d", "data": '{"v": 1}'}])
    doc = MySQLDocumentStore(factory).get("c/d")

    assert doc.doc_id == "d"
    assert doc.data == {"v": 1}
    assert factory.commits == 1


def test_list_builds_range_query():
    factory = FakeConnectionFactory()
    MySQLDocumentStore(factory).list("attendance/u1/days", start_at="2024-06-01", end_at="2024-06-30", descending=True, limit=1)

    sql, params = factory.executed[0]
    assert "doc_id >= %s AND doc_id <= %s" in sql
    assert "ORDER BY doc_id DESC" in sql
    assert params == ("attendance/u1/days", "2024-06-01", "2024-06-30", 1)


def test_transaction_is_rerun_after_deadlock():
    factory = FakeConnectionFactory(failures=[_deadlock()])
    calls = []

    def _txn(tx):
        calls.append(1)
        assert tx.get("c/d") is None
        tx.set("c/d", {"v": 1})
        return "done"

    assert MySQLDocumentStore(factory).run_transaction(_txn) == "done"
    assert len(calls) == 2
    assert factory.rollbacks == 1
    assert factory.commits == 1
    assert any("FOR UPDATE" in sql for sql, _ in factory.executed)


def test_persistent_contention_becomes_storage_unavailable():
    factory = FakeConnectionFactory(failures=[_deadlock() for _ in range(3)])

    with pytest.raises(StorageUnavailable) as exc:
        MySQLDocumentStore(factory, max_attempts=3).run_transaction(lambda tx: tx.get("c/d"))
    assert exc.value.retryable is True
    assert factory.rollbacks == 3


def test_other_driver_errors_fail_closed_without_retry():
    factory = FakeConnectionFactory(failures=[mysql.connector.errors.ProgrammingError(msg="no table", errno=1146)])
    calls = []

    def _txn(tx):
        calls.append(1)
        tx.set("c/d", {"v": 1})

    with pytest.raises(StorageUnavailable):
        MySQLDocumentStore(factory).run_transaction(_txn)
    assert len(calls) == 1
    assert factory.rollbacks == 1
    assert factory.commits == 0


def test_decode_json_variants():
    assert decode_json(None) == {}
    assert decode_json(b'{"a": 1}') == {"a": 1}
    assert decode_json({"a": 1}) == {"a": 1}
    with pytest.raises(TypeError):
        decode_json("[1, 2]")


def test_creating_a_missing_document_uses_a_plain_insert():
    factory = FakeConnectionFactory()

    def _txn(tx):
        assert tx.get("c/d") is None
        tx.set("c/d", {"v": 1})

    MySQLDocumentStore(factory).run_transaction(_txn)

    inserts = [sql for sql, _ in factory.executed if sql.startswith("INSERT")]
    assert len(inserts) == 1
    assert "ON DUPLICATE KEY" not in inserts[0]


def test_existing_document_is_upserted():
    factory = FakeConnectionFactory(rows=[{"path": "c/d", "doc_id": "d", "data": '{"v": 1}'}])

    def _txn(tx):
        assert tx.get("c/d").data == {"v": 1}
        tx.set("c/d", {"v": 2})

    MySQLDocumentStore(factory).run_transaction(_txn)

    inserts = [sql for sql, _ in factory.executed if sql.startswith("INSERT")]
    assert "ON DUPLICATE KEY UPDATE" in inserts[0]


def test_losing_a_create_race_reruns_and_sees_the_winner():
    winner = {"path": "c/d", "doc_id": "d", "data": '{"v": "winner"}'}
    factory = FakeConnectionFactory(created_elsewhere=[winner])
    calls = []

    def _set_if_absent(tx):
        calls.append(1)
        doc = tx.get("c/d")
        if doc is not None:
            return False, doc.data["v"]
        tx.set("c/d", {"v": "mine"})
        return True, "mine"

    assert MySQLDocumentStore(factory).run_transaction(_set_if_absent) == (False, "winner")
    assert len(calls) == 2
    assert factory.rollbacks == 1
    assert factory.commits == 1
