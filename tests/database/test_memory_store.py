from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.database.document_store import doc_path, split_path
from src.attendance_tracker.attendance_tracker.database.memory_store import InMemoryDocumentStore


def test_doc_path_quotes_each_segment():
    assert doc_path("attendance", "a/b c", "days", "2024-06-03") == "attendance/a%2Fb%20c/days/2024-06-03"
    assert split_path("attendance/u1/days/2024-06-03") == ("attendance/u1/days", "2024-06-03")
    with pytest.raises(ValueError):
        split_path("panel")


def test_set_replaces_unless_merging():
    store = InMemoryDocumentStore()
    store.set("c/d", {"a": 1, "b": 2})
    store.set("c/d", {"b": 3}, merge=True)
    assert store.get("c/d").data == {"a": 1, "b": 3}

    store.set("c/d", {"c": 4})
    assert store.get("c/d").data == {"c": 4}


def test_returned_documents_are_copies():
    store = InMemoryDocumentStore()
    store.set("c/d", {"items": [1]})
    store.get("c/d").data["items"].append(2)
    assert store.get("c/d").data == {"items": [1]}


def test_list_filters_by_collection_and_range():
    store = InMemoryDocumentStore()
    for day in ("2024-06-01", "2024-06-02", "2024-06-03"):
        store.set(f"attendance/u1/days/{day}", {"status": "present"})
    store.set("attendance/u1/sessions/s1", {"name": "x"})

    ids = [d.doc_id for d in store.list("attendance/u1/days", start_at="2024-06-02")]
    assert ids == ["2024-06-02", "2024-06-03"]
    ids = [d.doc_id for d in store.list("attendance/u1/days", descending=True, limit=2)]
    assert ids == ["2024-06-03", "2024-06-02"]
    assert store.list("attendance/u2/days") == []


def test_transaction_sees_its_own_writes_and_commits_at_the_end():
    store = InMemoryDocumentStore()
    store.set("c/keep", {"v": 1})

    def _txn(tx):
        tx.set("c/new", {"v": 2})
        tx.delete("c/keep")
        assert tx.get("c/new").data == {"v": 2}
        assert tx.get("c/keep") is None
        return [d.doc_id for d in tx.list("c")]

    assert store.run_transaction(_txn) == ["new"]
    assert store.dump() == {"c/new": {"v": 2}}


def test_failed_transaction_writes_nothing():
    store = InMemoryDocumentStore({"c/d": {"v": 1}})

    def _txn(tx):
        tx.set("c/d", {"v": 2})
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.run_transaction(_txn)
    assert store.get("c/d").data == {"v": 1}
