from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import SelectResult, Session


class SessionRegistry(Protocol):
    """Named date ranges per user, with at most one selected session.

    Every mutating call keeps the selection unique: clearing it elsewhere
    and setting it on the target is one logical update.
    """

    def list(self, key: str) -> Sequence[Session]:
        """Newest-created first; among equal creation times the later insert comes first."""

        raise NotImplementedError

    def find(self, key: str, identifier: str) -> Sequence[Session]:
        """Exact code match first, else case-insensitive name matches (possibly several)."""

        raise NotImplementedError

    def create(
        self,
        key: str,
        *,
        name: str,
        start_date: date,
        end_date: Optional[date] = None,
        make_selected: bool = False,
    ) -> Session:
        raise NotImplementedError

    def select(self, key: str, identifier: str) -> SelectResult:
        raise NotImplementedError

    def clear_selection(self, key: str) -> None:
        raise NotImplementedError

    def delete(self, key: str, session_id: str) -> bool:
        raise NotImplementedError
