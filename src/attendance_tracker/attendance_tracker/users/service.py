from __future__ import annotations

from typing import Iterable

from ..common.validators import require_weekdays
from .identity import UserKeyResolver
from .model import UserConfig
from .repository import UserConfigRepository


class UserConfigService:
    """Use case: read and update per-user working-day configuration."""

    def __init__(self, configs: UserConfigRepository, keys: UserKeyResolver):
        self._configs = configs
        self._keys = keys

    def get_config(self, uid: str) -> UserConfig:
        return self._configs.get(self._keys.resolve(uid))

    def set_weekly_days_off(self, uid: str, days: Iterable[object]) -> UserConfig:
        config = UserConfig(weekly_days_off=require_weekdays(days, "weeklyDaysOff"))
        self._configs.save(self._keys.resolve(uid), config)
        return config
