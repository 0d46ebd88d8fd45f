from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import InvalidDate

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value.strip()):
        raise InvalidDate(f"Ngày không hợp lệ (YYYY-MM-DD): {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDate(f"Ngày không hợp lệ (YYYY-MM-DD): {value!r}")


def parse_year_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    m = _YEAR_MONTH_RE.match((value or "").strip()) if isinstance(value, str) else None
    if not m:
        raise InvalidDate(f"Tháng không hợp lệ (YYYY-MM): {value!r}")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidDate(f"Tháng không hợp lệ (YYYY-MM): {value!r}")
    return year, month


def format_year_month(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive (empty when start > end)."""
    day = start
    one = timedelta(days=1)
    while day <= end:
        yield day
        day += one
