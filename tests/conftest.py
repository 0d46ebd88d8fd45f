from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.common.clock import fixed_clock
from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.database.memory_store import InMemoryDocumentStore

# Thursday
TODAY = date(2024, 6, 20)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock(today):
    return fixed_clock(today)


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def container(store, clock):
    return build_container(store=store, clock=clock)
