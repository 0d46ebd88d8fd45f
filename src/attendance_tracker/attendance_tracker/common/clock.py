from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

from ..core.constants import DEFAULT_TIMEZONE_OFFSET_MINUTES


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Clock:
    """Resolves "today" as UTC wall-clock time shifted by a fixed minute offset.

    This is not a timezone conversion: there is no DST and no tz database,
    only a constant shift (330 minutes by default, i.e. UTC+05:30).

    Note: ``now_utc`` is injectable so tests can pin the current instant.
    """

    def __init__(
        self,
        offset_minutes: int = DEFAULT_TIMEZONE_OFFSET_MINUTES,
        *,
        now_utc: Optional[Callable[[], datetime]] = None,
    ):
        self._offset = timedelta(minutes=int(offset_minutes))
        self._now_utc = now_utc or _utcnow

    @property
    def offset_minutes(self) -> int:
        return int(self._offset.total_seconds() // 60)

    def now_utc(self) -> datetime:
        return self._now_utc()

    def now_local(self) -> datetime:
        return self._now_utc() + self._offset

    def today(self) -> date:
        return self.now_local().date()

    def weekday(self) -> int:
        """ISO weekday of today: 1 = Monday ... 7 = Sunday."""
        return self.today().isoweekday()


def fixed_clock(today: date, *, offset_minutes: int = DEFAULT_TIMEZONE_OFFSET_MINUTES) -> Clock:
    """Clock pinned so that ``today()`` returns the given date (noon local time)."""
    local_noon = datetime(today.year, today.month, today.day, 12, 0, tzinfo=timezone.utc)
    pinned = local_noon - timedelta(minutes=int(offset_minutes))
    return Clock(offset_minutes, now_utc=lambda: pinned)
