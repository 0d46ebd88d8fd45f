"""Document-store boundary.

The services persist through a small document-style key-value interface:
``get(path)``, ``set(path, fields, merge)``, ``list(collection)`` and
``run_transaction(fn)`` for atomic read-modify-write. A path is a
``/``-separated sequence of collection and document ids, e.g.
``attendance/u1/days/2024-06-03``; the collection of that document is
``attendance/u1/days`` and its id is ``2024-06-03``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, TypeVar
from urllib.parse import quote

T = TypeVar("T")


@dataclass(frozen=True)
class Document:
    path: str
    doc_id: str
    data: Dict[str, Any] = field(default_factory=dict)


def doc_path(*parts: str) -> str:
    """Join path segments, quoting each so ids may contain any character."""
    return "/".join(quote(str(p), safe="") for p in parts)


def split_path(path: str) -> tuple[str, str]:
    """Return (collection, doc_id) of a document path."""
    collection, _, doc_id = path.rpartition("/")
    if not collection or not doc_id:
        raise ValueError(f"Not a document path: {path!r}")
    return collection, doc_id


class Transaction(Protocol):
    def get(self, path: str) -> Optional[Document]:
        raise NotImplementedError

    def set(self, path: str, fields: Dict[str, Any], *, merge: bool = False) -> None:
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError

    def list(
        self,
        collection: str,
        *,
        start_at: Optional[str] = None,
        end_at: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        raise NotImplementedError


class DocumentStore(Protocol):
    """Document-style storage interface.

    Repositories depend on this protocol, never on a concrete database.
    Every I/O failure must surface as ``StorageUnavailable``.
    """

    def get(self, path: str) -> Optional[Document]:
        raise NotImplementedError

    def set(self, path: str, fields: Dict[str, Any], *, merge: bool = False) -> None:
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError

    def list(
        self,
        collection: str,
        *,
        start_at: Optional[str] = None,
        end_at: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        """List documents of one collection ordered by id.

        ``start_at``/``end_at`` bound the ids inclusively.
        """

        raise NotImplementedError

    def run_transaction(self, fn: Callable[[Transaction], T]) -> T:
        """Run ``fn`` atomically; writes are applied only if ``fn`` returns."""

        raise NotImplementedError
