from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.repository import DayStatusStore
from ..common.clock import Clock
from ..common.datetime_utils import iter_days, month_bounds, parse_year_month
from ..users.repository import UserConfigRepository
from ..workdays.policy import WorkingDayPolicy
from .model import PercentageResult


class AttendanceAggregator:
    """Computes present / working-day ratios by walking a date range one day at a time.

    A day counts toward the total only if it is not after today, is a
    working day, and is not marked holiday or not-enrolled. It counts as
    present only if marked present. Unmarked working days count as not
    present. Nothing is cached between calls.
    """

    def __init__(
        self,
        days: DayStatusStore,
        configs: UserConfigRepository,
        clock: Optional[Clock] = None,
        policy: Optional[WorkingDayPolicy] = None,
    ):
        self._days = days
        self._configs = configs
        self._clock = clock or Clock()
        self._policy = policy or WorkingDayPolicy()

    def range_percentage(self, key: str, start: date, end: date) -> PercentageResult:
        today = self._clock.today()
        config = self._configs.get(key)
        statuses = {r.day: r.status for r in self._days.list_between(key, start, min(end, today))}

        present = 0
        total = 0
        for day in iter_days(start, end):
            if day > today:
                break
            if not self._policy.is_working_day(day, config):
                continue
            status = statuses.get(day)
            if status is not None and not status.counts_as_working:
                continue
            total += 1
            if status is not None and status.is_present:
                present += 1

        return PercentageResult(start=start, end=end, present_days=present, total_working_days=total)

    def monthly(self, key: str, year_month: str) -> PercentageResult:
        start, end = month_bounds(*parse_year_month(year_month))
        return self.range_percentage(key, start, end)

    def monthly_percentage(self, key: str, year_month: str) -> int:
        return self.monthly(key, year_month).percentage
