from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.attendance_tracker.attendance_tracker.common.clock import Clock, fixed_clock
from src.attendance_tracker.attendance_tracker.common.datetime_utils import (
    format_year_month,
    iter_days,
    month_bounds,
    parse_iso_date,
    parse_year_month,
)
from src.attendance_tracker.attendance_tracker.common.validators import require_non_empty, require_weekdays
from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidDate, ValidationError


def test_parse_iso_date_accepts_strings_and_dates():
    assert parse_iso_date("2024-06-03") == date(2024, 6, 3)
    assert parse_iso_date(" 2024-06-03 ") == date(2024, 6, 3)
    assert parse_iso_date(date(2024, 6, 3)) == date(2024, 6, 3)
    assert parse_iso_date(datetime(2024, 6, 3, 23, 59)) == date(2024, 6, 3)


@pytest.mark.parametrize("value", ["2024-6-3", "2024-02-30", "03/06/2024", "", None, 20240603])
def test_parse_iso_date_rejects_malformed(value):
    with pytest.raises(InvalidDate):
        parse_iso_date(value)


def test_parse_year_month():
    assert parse_year_month("2024-06") == (2024, 6)
    for bad in ("2024-13", "2024-00", "2024-6", "June", None):
        with pytest.raises(InvalidDate):
            parse_year_month(bad)
    assert format_year_month(date(2024, 6, 30)) == "2024-06"


def test_month_bounds_handles_leap_february():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 2) == (date(2023, 2, 1), date(2023, 2, 28))


def test_iter_days_is_inclusive_and_empty_when_reversed():
    assert list(iter_days(date(2024, 6, 29), date(2024, 7, 1))) == [
        date(2024, 6, 29),
        date(2024, 6, 30),
        date(2024, 7, 1),
    ]
    assert list(iter_days(date(2024, 6, 2), date(2024, 6, 1))) == []


def test_clock_applies_fixed_offset_to_utc():
    # 19:00 UTC + 05:30 is already the next local day
    clock = Clock(330, now_utc=lambda: datetime(2024, 6, 3, 19, 0, tzinfo=timezone.utc))
    assert clock.today() == date(2024, 6, 4)
    assert clock.weekday() == 2
    assert clock.offset_minutes == 330

    assert Clock(0, now_utc=lambda: datetime(2024, 6, 3, 19, 0, tzinfo=timezone.utc)).today() == date(2024, 6, 3)


def test_fixed_clock_pins_today_for_any_offset():
    for offset in (-600, 0, 330, 840):
        assert fixed_clock(date(2024, 6, 3), offset_minutes=offset).today() == date(2024, 6, 3)


def test_require_weekdays():
    assert require_weekdays(["1", 6, 6], "weeklyDaysOff") == frozenset({1, 6})
    assert require_weekdays([], "weeklyDaysOff") == frozenset()
    for bad in ([0], [8], ["x"], [True], [None]):
        with pytest.raises(ValidationError):
            require_weekdays(bad, "weeklyDaysOff")


def test_require_non_empty():
    assert require_non_empty("  u1 ", "uid") == "u1"
    with pytest.raises(ValidationError):
        require_non_empty("   ", "uid")
