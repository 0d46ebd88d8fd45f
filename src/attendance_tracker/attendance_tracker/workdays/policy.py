from __future__ import annotations

from datetime import date

from ..core.constants import ISO_SUNDAY
from ..users.model import UserConfig


class WorkingDayPolicy:
    """Decides whether a calendar date is a working day for a user.

    Sunday is never a working day; neither is any weekday listed in the
    user's ``weekly_days_off``. Holiday and not-enrolled statuses are not
    considered here: the aggregator excludes those separately.
    """

    def is_working_day(self, day: date, config: UserConfig) -> bool:
        weekday = day.isoweekday()
        if weekday == ISO_SUNDAY:
            return False
        return weekday not in config.weekly_days_off
