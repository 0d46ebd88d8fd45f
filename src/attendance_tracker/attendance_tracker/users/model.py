from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserConfig:
    """Cấu hình theo người dùng: các ngày nghỉ cố định trong tuần.

    ``weekly_days_off`` dùng số thứ tự ISO: Thứ Hai = 1 ... Chủ Nhật = 7.
    """

    weekly_days_off: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def from_document(cls, data: Optional[Dict[str, Any]]) -> "UserConfig":
        raw = (data or {}).get("weeklyDaysOff") or []
        if not isinstance(raw, (list, tuple, set, frozenset)):
            logger.warning("ignoring malformed weeklyDaysOff: %r", raw)
            return cls()

        days: set[int] = set()
        for v in raw:
            try:
                n = int(v)
            except (TypeError, ValueError):
                n = 0
            if isinstance(v, bool) or not 1 <= n <= 7:
                logger.warning("ignoring invalid weekday in weeklyDaysOff: %r", v)
                continue
            days.add(n)
        return cls(weekly_days_off=frozenset(days))

    def to_fields(self) -> Dict[str, Any]:
        return {"weeklyDaysOff": sorted(self.weekly_days_off)}


@dataclass(frozen=True)
class AccountLink:
    uid: str
    attendance_key: str
    linked_at: Optional[str] = None
