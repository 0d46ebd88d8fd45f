from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_SESSION_LIST_LIMIT
from ..core.exceptions import AmbiguousSession, SessionNotFound
from ..users.identity import UserKeyResolver
from .model import SelectResult, Session
from .repository import SessionRegistry


class SessionService:
    """Use case: list, create, select and delete a user's sessions."""

    def __init__(self, sessions: SessionRegistry, keys: UserKeyResolver, *, list_limit: int = DEFAULT_SESSION_LIST_LIMIT):
        self._sessions = sessions
        self._keys = keys
        self._list_limit = int(list_limit)

    def list_sessions(self, uid: str) -> Sequence[Session]:
        return self._sessions.list(self._keys.resolve(uid))

    def available_names(self, uid: str, limit: Optional[int] = None) -> list[str]:
        """Names to offer when the caller has to ask which session to use."""
        limit = self._list_limit if limit is None else int(limit)
        return [s.name for s in self.list_sessions(uid) if s.name][:limit]

    def create_session(
        self,
        uid: str,
        *,
        name: str,
        start_date: date | str,
        end_date: date | str | None = None,
        make_selected: bool = False,
    ) -> Session:
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date) if end_date else None
        return self._sessions.create(
            self._keys.resolve(uid),
            name=name,
            start_date=start,
            end_date=end,
            make_selected=bool(make_selected),
        )

    def select_session(self, uid: str, identifier: str) -> SelectResult:
        return self._sessions.select(self._keys.resolve(uid), identifier)

    def clear_selection(self, uid: str) -> None:
        self._sessions.clear_selection(self._keys.resolve(uid))

    def delete_session(self, uid: str, identifier: str) -> Session:
        key = self._keys.resolve(uid)
        matches = self._sessions.find(key, identifier)
        if not matches:
            raise SessionNotFound(identifier, available=self.available_names(uid))
        if len(matches) > 1:
            raise AmbiguousSession(identifier, candidates=matches)
        if not self._sessions.delete(key, matches[0].session_id):
            raise SessionNotFound(identifier, available=self.available_names(uid))
        return matches[0]
