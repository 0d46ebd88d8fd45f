from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AnswerOutcome, DayStatusKind, MarkOutcome
from ..core.exceptions import InvalidStatus, ValidationError

_STATUS_ALIASES = {
    "not_enrolled": DayStatusKind.NOT_ENROLLED,
    "notenrolled": DayStatusKind.NOT_ENROLLED,
    "not enrolled": DayStatusKind.NOT_ENROLLED,
}


def parse_status_kind(value: Any) -> DayStatusKind:
    if isinstance(value, DayStatusKind):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidStatus(f"Trạng thái không hợp lệ: {value!r}")
    v = value.strip().lower()
    if v in _STATUS_ALIASES:
        return _STATUS_ALIASES[v]
    try:
        return DayStatusKind(v)
    except ValueError:
        raise InvalidStatus(f"Trạng thái không hợp lệ: {value!r}")


@dataclass(frozen=True)
class DayStatus:
    """Trạng thái của một ngày: Present | Absent | Holiday(name) | NotEnrolled.

    Chỉ ``HOLIDAY`` mang theo tên ngày lễ. Giải mã một lần tại ranh giới lưu trữ
    (``from_fields``), phần còn lại của hệ thống chỉ làm việc với kiểu này.
    """

    kind: DayStatusKind
    holiday_name: Optional[str] = None

    def __post_init__(self):
        if self.kind == DayStatusKind.HOLIDAY:
            if not self.holiday_name or not self.holiday_name.strip():
                raise ValidationError("Tên ngày lễ không được để trống")
        elif self.holiday_name is not None:
            raise ValidationError("Chỉ trạng thái holiday mới có tên ngày lễ")

    @classmethod
    def present(cls) -> "DayStatus":
        return cls(DayStatusKind.PRESENT)

    @classmethod
    def absent(cls) -> "DayStatus":
        return cls(DayStatusKind.ABSENT)

    @classmethod
    def holiday(cls, name: str) -> "DayStatus":
        return cls(DayStatusKind.HOLIDAY, (name or "").strip() or None)

    @classmethod
    def not_enrolled(cls) -> "DayStatus":
        return cls(DayStatusKind.NOT_ENROLLED)

    @classmethod
    def parse(cls, status: Any, holiday_name: Optional[str] = None) -> "DayStatus":
        """Tạo từ dữ liệu người gọi; ``holiday_name`` chỉ được dùng khi trạng thái là holiday."""
        kind = parse_status_kind(status)
        if kind == DayStatusKind.HOLIDAY:
            return cls.holiday(holiday_name or "")
        return cls(kind)

    @classmethod
    def from_fields(cls, data: Mapping[str, Any]) -> "DayStatus":
        """Giải mã một document ngày đã lưu.

        Dữ liệu cũ lưu ``status`` dưới dạng chuỗi trần hoặc object lồng
        ``{"status": ..., "name": ...}``.
        """

        raw = data.get("status")
        name = data.get("holidayName")
        if isinstance(raw, Mapping):
            name = raw.get("name") or raw.get("holidayName") or name
            raw = raw.get("status")
        kind = parse_status_kind(raw)
        if kind == DayStatusKind.HOLIDAY:
            # A holiday stored without a name stays a holiday.
            return cls(kind, str(name).strip() if name and str(name).strip() else "Holiday")
        return cls(kind)

    def to_fields(self) -> Dict[str, Any]:
        return {"status": self.kind.value, "holidayName": self.holiday_name}

    @property
    def counts_as_working(self) -> bool:
        """False với các trạng thái bị loại khỏi tổng số ngày làm việc."""
        return self.kind not in (DayStatusKind.HOLIDAY, DayStatusKind.NOT_ENROLLED)

    @property
    def is_present(self) -> bool:
        return self.kind == DayStatusKind.PRESENT

    def same_kind(self, other: "DayStatus") -> bool:
        return self.kind == other.kind


@dataclass(frozen=True)
class DayRecord:
    """Thực thể miền (domain): trạng thái điểm danh của một người trong một ngày."""

    key: str
    day: date
    status: DayStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def iso_date(self) -> str:
        return self.day.isoformat()


@dataclass(frozen=True)
class SetResult:
    """Kết quả của thao tác ghi set-if-absent."""

    ALREADY_SET = "already_set"

    ok: bool
    reason: Optional[str] = None
    existing: Optional[DayRecord] = None


@dataclass(frozen=True)
class PendingConfirmation:
    """Thay đổi đang chờ người dùng xác nhận (chỉ sống trong một lượt hội thoại)."""

    key: str
    day: date
    new_status: DayStatus
    old_status: DayStatus

    def to_attributes(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "date": self.day.isoformat(),
            "newStatus": self.new_status.kind.value,
            "oldStatus": self.old_status.kind.value,
            "holidayName": self.new_status.holiday_name,
            "oldHolidayName": self.old_status.holiday_name,
        }

    @classmethod
    def from_attributes(cls, data: Any) -> Optional["PendingConfirmation"]:
        """Giải mã attributes do người gọi gửi lên; sai định dạng nghĩa là không có thay đổi nào đang chờ."""
        if not isinstance(data, Mapping):
            return None
        try:
            return cls(
                key=str(data["key"]),
                day=parse_iso_date(data["date"]),
                new_status=DayStatus.parse(data["newStatus"], data.get("holidayName")),
                old_status=DayStatus.parse(data["oldStatus"], data.get("oldHolidayName") or "Holiday"),
            )
        except (KeyError, TypeError, ValidationError):
            return None


@dataclass(frozen=True)
class MarkResult:
    outcome: MarkOutcome
    day: date
    status: DayStatus
    existing: Optional[DayStatus] = None
    pending: Optional[PendingConfirmation] = None


@dataclass(frozen=True)
class AnswerResult:
    outcome: AnswerOutcome
    day: Optional[date] = None
    status: Optional[DayStatus] = None
    previous: Optional[DayStatus] = None
