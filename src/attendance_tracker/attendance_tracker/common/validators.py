from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_weekdays(values: Iterable[object], field_name: str) -> frozenset[int]:
    """Validate ISO weekday numbers (Monday=1 .. Sunday=7)."""
    days: set[int] = set()
    for v in values or ():
        try:
            n = int(v)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} không hợp lệ: {v!r}")
        if isinstance(v, bool) or not 1 <= n <= 7:
            raise ValidationError(f"{field_name} không hợp lệ: {v!r}")
        days.add(n)
    return frozenset(days)
