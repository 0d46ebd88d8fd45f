from __future__ import annotations

from typing import Optional, Protocol

from .model import AccountLink, UserConfig


class UserConfigRepository(Protocol):
    def get(self, key: str) -> UserConfig:
        """Own config of ``key``, else the global default, else an empty config."""

        raise NotImplementedError

    def save(self, key: str, config: UserConfig) -> None:
        raise NotImplementedError


class AccountLinkRepository(Protocol):
    def get(self, uid: str) -> Optional[AccountLink]:
        raise NotImplementedError

    def save(self, link: AccountLink) -> None:
        raise NotImplementedError

    def delete(self, uid: str) -> bool:
        raise NotImplementedError
