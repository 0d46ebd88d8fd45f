from __future__ import annotations

from enum import Enum


class DayStatusKind(str, Enum):
    """Trạng thái điểm danh của một ngày, đúng giá trị lưu trong CSDL."""

    PRESENT = "present"
    ABSENT = "absent"
    HOLIDAY = "holiday"
    NOT_ENROLLED = "not-enrolled"


class MarkOutcome(str, Enum):
    """Kết quả của một lượt đánh dấu điểm danh (cho tầng gọi chọn lời thoại)."""

    MARKED = "marked"
    ALREADY_SET = "already_set"
    CONFIRMATION_REQUIRED = "confirmation_required"
    DAY_OFF = "day_off"
    FUTURE_DATE = "future_date"


class AnswerOutcome(str, Enum):
    """Kết quả khi người dùng trả lời có/không cho thay đổi đang chờ."""

    CHANGED = "changed"
    KEPT = "kept"
    NOTHING_TO_CONFIRM = "nothing_to_confirm"
    DAY_OFF = "day_off"


class WindowSource(str, Enum):
    """Cách khoảng ngày (session window) được xác định."""

    EXPLICIT = "explicit"
    SELECTED = "selected"
    LATEST = "latest"
    INFERRED = "inferred"
    TODAY = "today"
