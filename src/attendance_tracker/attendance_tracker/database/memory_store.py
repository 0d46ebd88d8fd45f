from __future__ import annotations

import copy
import threading
from typing import Any, Callable, Dict, Optional, Sequence, TypeVar

from .document_store import Document, split_path

T = TypeVar("T")

_DELETED = object()


def _select(
    docs: Dict[str, Dict[str, Any]],
    collection: str,
    *,
    start_at: Optional[str],
    end_at: Optional[str],
    descending: bool,
    limit: Optional[int],
) -> list[Document]:
    out: list[Document] = []
    for path, data in docs.items():
        coll, doc_id = split_path(path)
        if coll != collection:
            continue
        if start_at is not None and doc_id < start_at:
            continue
        if end_at is not None and doc_id > end_at:
            continue
        out.append(Document(path=path, doc_id=doc_id, data=copy.deepcopy(data)))
    out.sort(key=lambda d: d.doc_id, reverse=descending)
    if limit is not None:
        out = out[: int(limit)]
    return out


class InMemoryDocumentStore:
    """Thread-safe in-process document store.

    Used by tests and by ``STORAGE_BACKEND=memory``. Transactions hold one
    re-entrant lock for their whole duration and buffer writes until the
    callback returns, so a failing callback writes nothing.
    """

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self._docs: Dict[str, Dict[str, Any]] = copy.deepcopy(dict(initial or {}))
        self._lock = threading.RLock()

    def get(self, path: str) -> Optional[Document]:
        with self._lock:
            data = self._docs.get(path)
            if data is None:
                return None
            _, doc_id = split_path(path)
            return Document(path=path, doc_id=doc_id, data=copy.deepcopy(data))

    def set(self, path: str, fields: Dict[str, Any], *, merge: bool = False) -> None:
        split_path(path)
        with self._lock:
            if merge and path in self._docs:
                merged = dict(self._docs[path])
                merged.update(copy.deepcopy(fields))
                self._docs[path] = merged
            else:
                self._docs[path] = copy.deepcopy(dict(fields))

    def delete(self, path: str) -> None:
        with self._lock:
            self._docs.pop(path, None)

    def list(
        self,
        collection: str,
        *,
        start_at: Optional[str] = None,
        end_at: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        with self._lock:
            return _select(
                self._docs, collection, start_at=start_at, end_at=end_at, descending=descending, limit=limit
            )

    def run_transaction(self, fn: Callable[["_MemoryTransaction"], T]) -> T:
        with self._lock:
            tx = _MemoryTransaction(self)
            result = fn(tx)
            tx._commit()
            return result

    def dump(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._docs)


class _MemoryTransaction:
    def __init__(self, store: InMemoryDocumentStore):
        self._store = store
        self._writes: Dict[str, Any] = {}

    def _view(self) -> Dict[str, Dict[str, Any]]:
        view = dict(self._store._docs)
        for path, data in self._writes.items():
            if data is _DELETED:
                view.pop(path, None)
            else:
                view[path] = data
        return view

    def get(self, path: str) -> Optional[Document]:
        data = self._view().get(path)
        if data is None:
            return None
        _, doc_id = split_path(path)
        return Document(path=path, doc_id=doc_id, data=copy.deepcopy(data))

    def set(self, path: str, fields: Dict[str, Any], *, merge: bool = False) -> None:
        split_path(path)
        current = self._view().get(path)
        if merge and current is not None:
            merged = dict(current)
            merged.update(copy.deepcopy(fields))
            self._writes[path] = merged
        else:
            self._writes[path] = copy.deepcopy(dict(fields))

    def delete(self, path: str) -> None:
        self._writes[path] = _DELETED

    def list(
        self,
        collection: str,
        *,
        start_at: Optional[str] = None,
        end_at: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        return _select(
            self._view(), collection, start_at=start_at, end_at=end_at, descending=descending, limit=limit
        )

    def _commit(self) -> None:
        for path, data in self._writes.items():
            if data is _DELETED:
                self._store._docs.pop(path, None)
            else:
                self._store._docs[path] = data
        self._writes.clear()
