from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from ..core.constants import DEFAULT_PANEL_CONFIG_TTL_SECONDS, DEFAULT_PANEL_INDEX_PATH
from ..database.document_store import DocumentStore
from ..database.paths import config_path, link_path
from .model import AccountLink, UserConfig
from .repository import AccountLinkRepository, UserConfigRepository


class DocumentUserConfigRepository(UserConfigRepository):
    """User configs at ``configs/{key}`` with the panel document as the shared default.

    The panel document changes rarely and is read on every working-day check,
    so it is cached in process for ``panel_ttl_seconds``. Per-user documents
    are never cached.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        panel_path: str = DEFAULT_PANEL_INDEX_PATH,
        panel_ttl_seconds: float = DEFAULT_PANEL_CONFIG_TTL_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._panel_path = panel_path
        self._panel_ttl = float(panel_ttl_seconds)
        self._monotonic = monotonic
        self._panel_cache: Optional[tuple[float, UserConfig]] = None
        self._lock = threading.Lock()

    def get(self, key: str) -> UserConfig:
        doc = self._store.get(config_path(key))
        if doc is not None:
            return UserConfig.from_document(doc.data)
        return self._panel_default()

    def save(self, key: str, config: UserConfig) -> None:
        self._store.set(config_path(key), config.to_fields(), merge=True)

    def _panel_default(self) -> UserConfig:
        now = self._monotonic()
        with self._lock:
            if self._panel_cache and self._panel_cache[0] > now:
                return self._panel_cache[1]

        doc = self._store.get(self._panel_path)
        config = UserConfig.from_document(doc.data if doc else None)
        with self._lock:
            self._panel_cache = (now + self._panel_ttl, config)
        return config


class DocumentAccountLinkRepository(AccountLinkRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, uid: str) -> Optional[AccountLink]:
        doc = self._store.get(link_path(uid))
        if doc is None or not doc.data.get("attendanceKey"):
            return None
        return AccountLink(
            uid=uid,
            attendance_key=str(doc.data["attendanceKey"]),
            linked_at=doc.data.get("linkedAt"),
        )

    def save(self, link: AccountLink) -> None:
        self._store.set(
            link_path(link.uid),
            {"attendanceKey": link.attendance_key, "linkedAt": link.linked_at},
        )

    def delete(self, uid: str) -> bool:
        if self._store.get(link_path(uid)) is None:
            return False
        self._store.delete(link_path(uid))
        return True
