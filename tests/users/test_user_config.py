from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError
from src.attendance_tracker.attendance_tracker.database.paths import config_path
from src.attendance_tracker.attendance_tracker.users.document_repository import DocumentUserConfigRepository
from src.attendance_tracker.attendance_tracker.users.model import UserConfig


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_own_config_wins_over_panel_default(store):
    store.set("panel/index", {"weeklyDaysOff": [6]})
    store.set(config_path("u1"), {"weeklyDaysOff": []})
    repo = DocumentUserConfigRepository(store)

    assert repo.get("u1") == UserConfig()
    assert repo.get("u2") == UserConfig(weekly_days_off=frozenset({6}))


def test_missing_panel_means_no_days_off(store):
    assert DocumentUserConfigRepository(store).get("u1") == UserConfig()


def test_panel_default_is_cached_for_the_ttl(store):
    clock = FakeMonotonic()
    store.set("panel/index", {"weeklyDaysOff": [6]})
    repo = DocumentUserConfigRepository(store, panel_ttl_seconds=300, monotonic=clock)
    assert repo.get("u1").weekly_days_off == {6}

    store.set("panel/index", {"weeklyDaysOff": [1]})
    clock.now += 299
    assert repo.get("u1").weekly_days_off == {6}

    clock.now += 2
    assert repo.get("u1").weekly_days_off == {1}


def test_own_config_is_never_cached(store):
    repo = DocumentUserConfigRepository(store)
    repo.save("u1", UserConfig(weekly_days_off=frozenset({6})))
    assert repo.get("u1").weekly_days_off == {6}

    repo.save("u1", UserConfig(weekly_days_off=frozenset({5})))
    assert repo.get("u1").weekly_days_off == {5}


def test_invalid_stored_weekdays_are_dropped(store):
    store.set(config_path("u1"), {"weeklyDaysOff": [6, 9, "x", True, "7"]})
    assert DocumentUserConfigRepository(store).get("u1").weekly_days_off == {6, 7}

    store.set(config_path("u2"), {"weeklyDaysOff": "saturday"})
    assert DocumentUserConfigRepository(store).get("u2") == UserConfig()


def test_service_validates_and_saves(container, store):
    config = container.user_config_service.set_weekly_days_off("u1", [6, "5"])
    assert config.weekly_days_off == {5, 6}
    assert store.get(config_path("u1")).data == {"weeklyDaysOff": [5, 6]}

    with pytest.raises(ValidationError):
        container.user_config_service.set_weekly_days_off("u1", [8])
    assert container.user_config_service.get_config("u1").weekly_days_off == {5, 6}
