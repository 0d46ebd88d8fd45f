from __future__ import annotations

import logging
from typing import Optional

from ..common.clock import Clock
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from .model import AccountLink
from .repository import AccountLinkRepository

logger = logging.getLogger(__name__)


class UserKeyResolver:
    """Maps a caller's user id to the key its attendance data is stored under.

    Resolution is one lookup: an explicit link document ``links/{uid}``
    names the attendance key; without one the uid is its own key. Links are
    never followed transitively and never created implicitly.
    """

    def __init__(self, links: AccountLinkRepository, clock: Optional[Clock] = None):
        self._links = links
        self._clock = clock or Clock()

    def resolve(self, uid: str) -> str:
        uid = require_non_empty(uid, "uid")
        link = self._links.get(uid)
        return link.attendance_key if link else uid

    def link(self, uid: str, attendance_key: str, *, replace: bool = False) -> AccountLink:
        uid = require_non_empty(uid, "uid")
        attendance_key = require_non_empty(attendance_key, "attendanceKey")
        if attendance_key == uid:
            raise ValidationError("Không thể liên kết tài khoản với chính nó")

        existing = self._links.get(uid)
        if existing and existing.attendance_key == attendance_key:
            return existing
        if existing and not replace:
            raise ValidationError("Tài khoản đã được liên kết với khóa khác")

        link = AccountLink(uid=uid, attendance_key=attendance_key, linked_at=self._clock.now_utc().isoformat())
        self._links.save(link)
        logger.info("linked uid=%s to attendance key=%s (replaced=%s)", uid, attendance_key, bool(existing))
        return link

    def unlink(self, uid: str) -> bool:
        uid = require_non_empty(uid, "uid")
        removed = self._links.delete(uid)
        if removed:
            logger.info("unlinked uid=%s", uid)
        return removed
