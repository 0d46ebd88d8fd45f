from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.constants import SESSION_CODE_PREFIX_LENGTH
from ..core.enums import WindowSource
from ..core.exceptions import InvalidDate
from ..database.document_store import Document

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def make_session_code(name: str, suffix: str) -> str:
    """Chuyển chữ thường, bỏ ký tự không phải chữ/số, giữ 8 ký tự rồi nối hậu tố."""
    slug = _NON_ALNUM_RE.sub("", (name or "").lower())[:SESSION_CODE_PREFIX_LENGTH]
    return f"{slug}-{suffix}" if slug else suffix


def created_sort_value(value: Any) -> datetime:
    """Mốc thời gian để sắp xếp từ createdAt (chuỗi ISO); giá trị không đọc được xếp trước nhất."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return _EPOCH
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return _EPOCH


@dataclass(frozen=True)
class Session:
    """Thực thể miền (domain): một khoảng ngày có tên do người dùng tạo (ví dụ: một học kỳ).

    ``end_date`` = None nghĩa là session chưa kết thúc (tính đến hôm nay).
    """

    session_id: str
    name: str
    code: str
    start_date: date
    end_date: Optional[date]
    created_at: str
    seq: int = 0
    is_selected: bool = False
    legacy_preset: bool = False

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return created_sort_value(self.created_at), self.seq

    @classmethod
    def from_document(cls, doc: Document, *, selected_id: Optional[str] = None) -> Optional["Session"]:
        """Giải mã session đã lưu; trả về None (kèm cảnh báo) khi ngày không hợp lệ."""
        data = doc.data
        try:
            start = parse_iso_date(data.get("startDate") or data.get("start"))
            end_raw = data.get("endDate") or data.get("end")
            end = parse_iso_date(end_raw) if end_raw else None
        except InvalidDate:
            logger.warning("ignoring session with invalid dates: %s", doc.path)
            return None

        return cls(
            session_id=doc.doc_id,
            name=str(data.get("name") or ""),
            code=str(data.get("code") or doc.doc_id),
            start_date=start,
            end_date=end,
            created_at=str(data.get("createdAt") or ""),
            seq=int(data.get("seq") or 0),
            is_selected=selected_id == doc.doc_id,
            legacy_preset=bool(data.get("preset")),
        )

    def to_fields(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "code": self.code,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "createdAt": self.created_at,
            "seq": self.seq,
        }

    def matches_name(self, name: str) -> bool:
        return self.name.strip().lower() == (name or "").strip().lower()


@dataclass(frozen=True)
class SelectResult:
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"

    ok: bool
    session: Optional[Session] = None
    reason: Optional[str] = None
    candidates: Sequence[Session] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResolvedWindow:
    """Khoảng ngày (tính cả hai đầu) dùng để tính tỷ lệ điểm danh của session."""

    start: date
    end: date
    source: WindowSource
    session: Optional[Session] = None


def match_sessions(sessions: Sequence[Session], identifier: str) -> list[Session]:
    """Ưu tiên khớp đúng mã; nếu không có thì trả về mọi session trùng tên (không phân biệt hoa thường), không đoán."""
    ident = (identifier or "").strip()
    if not ident:
        return []
    by_code = [s for s in sessions if s.code == ident]
    if by_code:
        return by_code[:1]
    return [s for s in sessions if s.matches_name(ident)]
