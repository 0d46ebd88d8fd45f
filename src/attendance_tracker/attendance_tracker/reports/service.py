from __future__ import annotations

import logging
from typing import Optional

from ..common.clock import Clock
from ..common.datetime_utils import format_year_month, parse_year_month
from ..sessions.resolver import SessionResolver
from ..users.identity import UserKeyResolver
from .aggregator import AttendanceAggregator
from .model import PercentageResult, SessionPercentage

logger = logging.getLogger(__name__)


class ReportService:
    """Use case: monthly and session attendance percentages."""

    def __init__(
        self,
        aggregator: AttendanceAggregator,
        resolver: SessionResolver,
        keys: UserKeyResolver,
        clock: Optional[Clock] = None,
    ):
        self._aggregator = aggregator
        self._resolver = resolver
        self._keys = keys
        self._clock = clock or Clock()

    def monthly_percentage(self, uid: str, year_month: Optional[str] = None) -> PercentageResult:
        """``year_month`` is YYYY-MM; defaults to the current month."""
        year_month = year_month or format_year_month(self._clock.today())
        parse_year_month(year_month)
        key = self._keys.resolve(uid)
        result = self._aggregator.monthly(key, year_month)
        logger.debug("monthly key=%s month=%s -> %s/%s", key, year_month, result.present_days, result.total_working_days)
        return result

    def session_percentage(self, uid: str, session_name: Optional[str] = None) -> SessionPercentage:
        key = self._keys.resolve(uid)
        window = self._resolver.resolve(key, session_name)
        result = self._aggregator.range_percentage(key, window.start, window.end)
        logger.debug(
            "session key=%s window=%s..%s (%s) -> %s/%s",
            key, window.start, window.end, window.source.value, result.present_days, result.total_working_days,
        )
        return SessionPercentage(window=window, result=result)
