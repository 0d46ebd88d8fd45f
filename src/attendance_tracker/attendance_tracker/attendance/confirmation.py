"""Confirmation flow for destructive status changes.

States: idle (no ``pendingChange`` attribute) and awaiting confirmation
(``pendingChange`` holds a ``PendingConfirmation``). The attributes mapping
belongs to the caller's conversation; this module only reads and mutates
it and never persists it.

    idle --mark X, no record---------------> idle (set_if_absent)
    idle --mark X, record already X--------> idle (nothing written)
    idle --mark X, record Y != X-----------> awaiting(X, Y)
    awaiting --yes-------------------------> idle (overwrite with X)
    awaiting --no--------------------------> idle (nothing written)
    awaiting --anything else---------------> idle (pending change dropped)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, MutableMapping, Optional

from ..core.enums import AnswerOutcome, MarkOutcome
from .model import AnswerResult, DayStatus, MarkResult, PendingConfirmation
from .repository import DayStatusStore

logger = logging.getLogger(__name__)

PENDING_ATTRIBUTE = "pendingChange"

Attributes = MutableMapping[str, Any]


class ConfirmationFlow:
    def __init__(self, days: DayStatusStore):
        self._days = days

    @staticmethod
    def pending(attributes: Optional[Attributes]) -> Optional[PendingConfirmation]:
        if not attributes:
            return None
        return PendingConfirmation.from_attributes(attributes.get(PENDING_ATTRIBUTE))

    @staticmethod
    def discard(attributes: Optional[Attributes]) -> Optional[PendingConfirmation]:
        """Leave the awaiting state without writing; returns what was pending."""
        if not attributes or PENDING_ATTRIBUTE not in attributes:
            return None
        pending = PendingConfirmation.from_attributes(attributes.pop(PENDING_ATTRIBUTE))
        if pending:
            logger.debug("discarded pending change key=%s date=%s", pending.key, pending.day)
        return pending

    def mark(self, key: str, day: date, status: DayStatus, attributes: Attributes) -> MarkResult:
        # A new mark is never an answer to an older prompt.
        self.discard(attributes)

        existing = self._days.get(key, day)
        if existing is None:
            result = self._days.set_if_absent(key, day, status)
            if result.ok:
                return MarkResult(outcome=MarkOutcome.MARKED, day=day, status=status)
            # Lost a race against a concurrent mark of the same day.
            existing = result.existing

        if existing.status.same_kind(status):
            return MarkResult(outcome=MarkOutcome.ALREADY_SET, day=day, status=status, existing=existing.status)

        pending = PendingConfirmation(key=key, day=day, new_status=status, old_status=existing.status)
        attributes[PENDING_ATTRIBUTE] = pending.to_attributes()
        logger.info(
            "awaiting confirmation key=%s date=%s %s -> %s",
            key, day, existing.status.kind.value, status.kind.value,
        )
        return MarkResult(
            outcome=MarkOutcome.CONFIRMATION_REQUIRED,
            day=day,
            status=status,
            existing=existing.status,
            pending=pending,
        )

    def answer(self, key: str, yes: bool, attributes: Attributes) -> AnswerResult:
        pending = self.discard(attributes)
        if pending is None:
            return AnswerResult(outcome=AnswerOutcome.NOTHING_TO_CONFIRM)
        if pending.key != key:
            logger.warning("dropping pending change recorded for another user key")
            return AnswerResult(outcome=AnswerOutcome.NOTHING_TO_CONFIRM)

        if not yes:
            return AnswerResult(
                outcome=AnswerOutcome.KEPT, day=pending.day, status=pending.old_status, previous=pending.old_status
            )

        self._days.overwrite(key, pending.day, pending.new_status)
        logger.info("confirmed change key=%s date=%s -> %s", key, pending.day, pending.new_status.kind.value)
        return AnswerResult(
            outcome=AnswerOutcome.CHANGED, day=pending.day, status=pending.new_status, previous=pending.old_status
        )
