from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.repository import DayStatusStore
from ..common.clock import Clock
from ..core.constants import DEFAULT_SESSION_LIST_LIMIT
from ..core.enums import WindowSource
from ..core.exceptions import AmbiguousSession, SessionNotFound
from .model import ResolvedWindow, Session, match_sessions
from .repository import SessionRegistry

logger = logging.getLogger(__name__)


class SessionResolver:
    """Picks the date range a session percentage is computed over.

    Order: the explicitly named session (never falls back when a name was
    given), the selected session, the most recently created session, the
    first..last recorded day, and finally today alone. The end of the
    window never lies after today.
    """

    def __init__(
        self,
        sessions: SessionRegistry,
        days: DayStatusStore,
        clock: Optional[Clock] = None,
        *,
        list_limit: int = DEFAULT_SESSION_LIST_LIMIT,
    ):
        self._sessions = sessions
        self._days = days
        self._clock = clock or Clock()
        self._list_limit = int(list_limit)

    def resolve(self, key: str, session_name: Optional[str] = None) -> ResolvedWindow:
        today = self._clock.today()
        sessions = self._sessions.list(key)

        if session_name is not None and session_name.strip():
            matches = match_sessions(sessions, session_name)
            if not matches:
                names = [s.name for s in sessions if s.name][: self._list_limit]
                raise SessionNotFound(session_name, available=names)
            if len(matches) > 1:
                raise AmbiguousSession(session_name, candidates=matches)
            return self._window(matches[0], WindowSource.EXPLICIT, today)

        selected = [s for s in sessions if s.is_selected]
        if selected:
            return self._window(selected[0], WindowSource.SELECTED, today)

        if sessions:
            return self._window(sessions[0], WindowSource.LATEST, today)

        recorded = self._days.first_and_last(key)
        if recorded:
            first, last = recorded
            return ResolvedWindow(start=first, end=min(last, today), source=WindowSource.INFERRED)

        return ResolvedWindow(start=today, end=today, source=WindowSource.TODAY)

    @staticmethod
    def _window(session: Session, source: WindowSource, today: date) -> ResolvedWindow:
        end = session.end_date if session.end_date and session.end_date <= today else today
        logger.debug("resolved window %s..%s from %s session %s", session.start_date, end, source.value, session.session_id)
        return ResolvedWindow(start=session.start_date, end=end, source=source, session=session)
