from __future__ import annotations

from datetime import date
from typing import Any, MutableMapping, Optional

from ..common.clock import Clock
from ..common.datetime_utils import parse_iso_date
from ..core.enums import AnswerOutcome, MarkOutcome
from ..users.identity import UserKeyResolver
from ..users.repository import UserConfigRepository
from ..workdays.policy import WorkingDayPolicy
from .confirmation import ConfirmationFlow
from .model import AnswerResult, DayRecord, DayStatus, MarkResult
from .repository import DayStatusStore


class AttendanceService:
    """Use case: mark a day and confirm or reject status changes."""

    def __init__(
        self,
        days: DayStatusStore,
        configs: UserConfigRepository,
        keys: UserKeyResolver,
        *,
        clock: Optional[Clock] = None,
        policy: Optional[WorkingDayPolicy] = None,
        flow: Optional[ConfirmationFlow] = None,
    ):
        self._days = days
        self._configs = configs
        self._keys = keys
        self._clock = clock or Clock()
        self._policy = policy or WorkingDayPolicy()
        self._flow = flow or ConfirmationFlow(days)

    def _is_working_day(self, key: str, day: date) -> bool:
        return self._policy.is_working_day(day, self._configs.get(key))

    def mark(
        self,
        uid: str,
        status: Any,
        *,
        day: date | str | None = None,
        holiday_name: Optional[str] = None,
        attributes: Optional[MutableMapping[str, Any]] = None,
    ) -> MarkResult:
        new_status = DayStatus.parse(status, holiday_name)
        target = parse_iso_date(day) if day is not None else self._clock.today()
        attributes = {} if attributes is None else attributes

        key = self._keys.resolve(uid)
        if target > self._clock.today():
            self._flow.discard(attributes)
            return MarkResult(outcome=MarkOutcome.FUTURE_DATE, day=target, status=new_status)
        if not self._is_working_day(key, target):
            self._flow.discard(attributes)
            return MarkResult(outcome=MarkOutcome.DAY_OFF, day=target, status=new_status)

        return self._flow.mark(key, target, new_status, attributes)

    def answer(self, uid: str, yes: bool, attributes: Optional[MutableMapping[str, Any]]) -> AnswerResult:
        attributes = {} if attributes is None else attributes
        key = self._keys.resolve(uid)

        pending = self._flow.pending(attributes)
        if yes and pending and pending.key == key and not self._is_working_day(key, pending.day):
            self._flow.discard(attributes)
            return AnswerResult(outcome=AnswerOutcome.DAY_OFF, day=pending.day, previous=pending.old_status)

        return self._flow.answer(key, bool(yes), attributes)

    def discard_pending(self, attributes: Optional[MutableMapping[str, Any]]) -> bool:
        """Any unrelated turn: drop the pending change without writing."""
        return self._flow.discard(attributes) is not None

    def get_day(self, uid: str, day: date | str) -> Optional[DayRecord]:
        target = parse_iso_date(day)
        return self._days.get(self._keys.resolve(uid), target)
