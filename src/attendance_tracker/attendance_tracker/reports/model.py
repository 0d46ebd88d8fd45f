from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..sessions.model import ResolvedWindow


def round_half_up_percent(present: int, total: int) -> int:
    """round(100 * present / total) with halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    # integer arithmetic: floor(100p/t + 1/2)
    return (200 * present + total) // (2 * total)


@dataclass(frozen=True)
class PercentageResult:
    start: date
    end: date
    present_days: int
    total_working_days: int

    @property
    def percentage(self) -> int:
        return round_half_up_percent(self.present_days, self.total_working_days)


@dataclass(frozen=True)
class SessionPercentage:
    window: ResolvedWindow
    result: PercentageResult

    @property
    def percentage(self) -> int:
        return self.result.percentage
