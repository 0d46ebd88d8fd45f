from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.clock import Clock
from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import InvalidDate
from ..database.document_store import Document, DocumentStore
from ..database.paths import day_path, days_collection
from .model import DayRecord, DayStatus, SetResult
from .repository import DayStatusStore

logger = logging.getLogger(__name__)


def _to_record(key: str, doc: Document) -> DayRecord:
    return DayRecord(
        key=key,
        day=parse_iso_date(doc.doc_id),
        status=DayStatus.from_fields(doc.data),
        created_at=doc.data.get("createdAt"),
        updated_at=doc.data.get("updatedAt"),
    )


class DocumentDayStatusStore(DayStatusStore):
    """Day records at ``attendance/{key}/days/{YYYY-MM-DD}``."""

    def __init__(self, store: DocumentStore, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or Clock()

    def _now(self) -> str:
        return self._clock.now_utc().isoformat()

    def get(self, key: str, day: date | str) -> Optional[DayRecord]:
        day = parse_iso_date(day)
        doc = self._store.get(day_path(key, day.isoformat()))
        return _to_record(key, doc) if doc else None

    def set_if_absent(self, key: str, day: date | str, status: DayStatus) -> SetResult:
        day = parse_iso_date(day)
        path = day_path(key, day.isoformat())
        now = self._now()

        def _txn(tx) -> SetResult:
            doc = tx.get(path)
            if doc is not None:
                return SetResult(ok=False, reason=SetResult.ALREADY_SET, existing=_to_record(key, doc))
            tx.set(path, {**status.to_fields(), "createdAt": now, "updatedAt": now})
            return SetResult(ok=True)

        result = self._store.run_transaction(_txn)
        if result.ok:
            logger.info("marked key=%s date=%s status=%s", key, day, status.kind.value)
        else:
            logger.debug("already set key=%s date=%s existing=%s", key, day, result.existing.status.kind.value)
        return result

    def overwrite(self, key: str, day: date | str, status: DayStatus) -> DayRecord:
        day = parse_iso_date(day)
        path = day_path(key, day.isoformat())
        now = self._now()

        def _txn(tx) -> DayRecord:
            doc = tx.get(path)
            created_at = doc.data.get("createdAt") if doc else None
            fields = {**status.to_fields(), "createdAt": created_at or now, "updatedAt": now}
            tx.set(path, fields)
            return DayRecord(key=key, day=day, status=status, created_at=fields["createdAt"], updated_at=now)

        record = self._store.run_transaction(_txn)
        logger.info("overwrote key=%s date=%s status=%s", key, day, status.kind.value)
        return record

    def list_between(self, key: str, start: date, end: date) -> Sequence[DayRecord]:
        if start > end:
            return []
        docs = self._store.list(days_collection(key), start_at=start.isoformat(), end_at=end.isoformat())
        return [_to_record(key, d) for d in docs]

    def first_and_last(self, key: str) -> Optional[tuple[date, date]]:
        first = self._first_valid(key, descending=False)
        if first is None:
            return None
        last = self._first_valid(key, descending=True)
        return first, last or first

    def _first_valid(self, key: str, *, descending: bool) -> Optional[date]:
        # Ids are ISO dates, so id order is date order.
        for doc in self._store.list(days_collection(key), descending=descending):
            try:
                return parse_iso_date(doc.doc_id)
            except InvalidDate:
                logger.warning("ignoring day document with non-date id: %s", doc.path)
        return None
