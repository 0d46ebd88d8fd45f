from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DayRecord, DayStatus, SetResult


class DayStatusStore(Protocol):
    """Durable per-user, per-day status records.

    ``key`` is the resolved attendance key (see ``users.identity``).
    Dates may be given as ``date`` or ISO strings; malformed strings raise
    ``InvalidDate`` before any I/O.
    """

    def get(self, key: str, day: date | str) -> Optional[DayRecord]:
        raise NotImplementedError

    def set_if_absent(self, key: str, day: date | str, status: DayStatus) -> SetResult:
        """Atomically create the record unless one exists.

        Of any number of concurrent callers for the same (key, day) exactly
        one gets ``ok=True``; the others get ``reason="already_set"`` and the
        winner's record.
        """

        raise NotImplementedError

    def overwrite(self, key: str, day: date | str, status: DayStatus) -> DayRecord:
        """Unconditional upsert (last write wins)."""

        raise NotImplementedError

    def list_between(self, key: str, start: date, end: date) -> Sequence[DayRecord]:
        raise NotImplementedError

    def first_and_last(self, key: str) -> Optional[tuple[date, date]]:
        """Earliest and latest day with any record, or None when there are none."""

        raise NotImplementedError
