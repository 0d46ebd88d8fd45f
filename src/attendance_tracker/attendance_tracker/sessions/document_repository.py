from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import replace
from datetime import date
from typing import Callable, Optional, Sequence

from ..common.clock import Clock
from ..common.validators import require_non_empty
from ..core.constants import SESSION_CODE_SUFFIX_BYTES
from ..core.exceptions import InvariantViolation, ValidationError
from ..database.document_store import DocumentStore
from ..database.paths import counters_path, selection_path, session_path, sessions_collection
from .model import SelectResult, Session, make_session_code, match_sessions
from .repository import SessionRegistry

logger = logging.getLogger(__name__)


def _random_suffix() -> str:
    return secrets.token_hex(SESSION_CODE_SUFFIX_BYTES)


class DocumentSessionRegistry(SessionRegistry):
    """Sessions at ``attendance/{key}/sessions/{id}``; the selection lives in its own
    document ``attendance/{key}/meta/selection`` so selecting never rewrites sessions.

    Session documents written by older versions may still carry ``preset: true``.
    Those flags are honoured only while no selection document exists, and are
    cleared whenever the selection changes.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Optional[Clock] = None,
        *,
        code_suffix: Callable[[], str] = _random_suffix,
    ):
        self._store = store
        self._clock = clock or Clock()
        self._code_suffix = code_suffix

    # region Reads
    def _load(self, reader, key: str, *, tx=None) -> list[Session]:
        selection = reader.get(selection_path(key))
        selected_id = selection.data.get("sessionId") if selection else None

        sessions = [
            s
            for s in (Session.from_document(d, selected_id=selected_id) for d in reader.list(sessions_collection(key)))
            if s is not None
        ]
        sessions.sort(key=lambda s: s.sort_key, reverse=True)

        if selected_id and not any(s.session_id == selected_id for s in sessions):
            logger.warning("selection of key=%s points at missing session %s; ignoring it", key, selected_id)
            selected_id = None
        if selection is None:
            selected_id = self._legacy_selection(key, sessions, tx=tx)

        if selected_id is None:
            return sessions
        return [replace(s, is_selected=s.session_id == selected_id) for s in sessions]

    def _legacy_selection(self, key: str, sessions: Sequence[Session], *, tx=None) -> Optional[str]:
        flagged = [s for s in sessions if s.legacy_preset]
        if len(flagged) <= 1:
            return flagged[0].session_id if flagged else None

        # sessions are newest first, so flagged[0] is the canonical choice
        canonical = flagged[0]
        error = InvariantViolation(
            f"{len(flagged)} sessions flagged as selected for key={key}: "
            + ", ".join(s.session_id for s in flagged)
        )
        logger.error("%s; keeping %s", error, canonical.session_id)
        if tx is not None:
            self._write_selection(tx, key, canonical.session_id)
        else:
            self._store.run_transaction(lambda t: self._write_selection(t, key, canonical.session_id))
        return canonical.session_id

    def list(self, key: str) -> Sequence[Session]:
        return self._load(self._store, key)

    def find(self, key: str, identifier: str) -> Sequence[Session]:
        return match_sessions(self.list(key), identifier)

    # endregion

    # region Writes
    def _write_selection(self, tx, key: str, session_id: Optional[str]) -> None:
        for doc in tx.list(sessions_collection(key)):
            if doc.data.get("preset") and doc.doc_id != session_id:
                tx.set(doc.path, {"preset": False}, merge=True)
        if session_id is None:
            tx.delete(selection_path(key))
        else:
            tx.set(
                selection_path(key),
                {"sessionId": session_id, "selectedAt": self._clock.now_utc().isoformat()},
            )

    def create(
        self,
        key: str,
        *,
        name: str,
        start_date: date,
        end_date: Optional[date] = None,
        make_selected: bool = False,
    ) -> Session:
        name = require_non_empty(name, "Tên session")
        if end_date is not None and end_date < start_date:
            raise ValidationError("Ngày kết thúc không thể trước ngày bắt đầu")

        code = make_session_code(name, self._code_suffix())
        now = self._clock.now_utc().isoformat()

        def _txn(tx) -> Session:
            existing = self._load(tx, key, tx=tx)
            same = next((s for s in existing if s.matches_name(name) or s.code == code), None)

            if same:
                # Replace in place: id, code, creation time and order stay stable.
                session = Session(
                    session_id=same.session_id,
                    name=name,
                    code=same.code,
                    start_date=start_date,
                    end_date=end_date,
                    created_at=same.created_at,
                    seq=same.seq,
                )
            else:
                counters = tx.get(counters_path(key))
                seq = int(counters.data.get("sessionSeq") or 0) + 1 if counters else 1
                tx.set(counters_path(key), {"sessionSeq": seq}, merge=True)
                session = Session(
                    session_id=uuid.uuid4().hex,
                    name=name,
                    code=code,
                    start_date=start_date,
                    end_date=end_date,
                    created_at=now,
                    seq=seq,
                )

            tx.set(session_path(key, session.session_id), session.to_fields())
            selected = make_selected or bool(same and same.is_selected)
            if selected:
                # a legacy preset flag becomes the selection record here
                self._write_selection(tx, key, session.session_id)
            return replace(session, is_selected=selected)

        session = self._store.run_transaction(_txn)
        logger.info(
            "saved session key=%s id=%s code=%s selected=%s", key, session.session_id, session.code, session.is_selected
        )
        return session

    def select(self, key: str, identifier: str) -> SelectResult:
        def _txn(tx) -> SelectResult:
            matches = match_sessions(self._load(tx, key, tx=tx), identifier)
            if not matches:
                return SelectResult(ok=False, reason=SelectResult.NOT_FOUND)
            if len(matches) > 1:
                return SelectResult(ok=False, reason=SelectResult.AMBIGUOUS, candidates=tuple(matches))
            self._write_selection(tx, key, matches[0].session_id)
            return SelectResult(ok=True, session=replace(matches[0], is_selected=True))

        result = self._store.run_transaction(_txn)
        if result.ok:
            logger.info("selected session key=%s id=%s", key, result.session.session_id)
        return result

    def clear_selection(self, key: str) -> None:
        self._store.run_transaction(lambda tx: self._write_selection(tx, key, None))
        logger.info("cleared session selection key=%s", key)

    def delete(self, key: str, session_id: str) -> bool:
        def _txn(tx) -> bool:
            path = session_path(key, session_id)
            if tx.get(path) is None:
                return False
            tx.delete(path)
            selection = tx.get(selection_path(key))
            if selection and selection.data.get("sessionId") == session_id:
                tx.delete(selection_path(key))
            return True

        deleted = self._store.run_transaction(_txn)
        if deleted:
            logger.info("deleted session key=%s id=%s", key, session_id)
        return deleted

    # endregion
