"""
Pytest fixtures and test configuration for spendsync tests.
"""

from datetime import date, timedelta

import pytest

from spendsync.storage import (
    DurableQueueStore,
    InMemoryRemoteStore,
    MemoryKeyValueStore,
    OfflineQueue,
)
from spendsync.types import Expense

YESTERDAY = (date.today() - timedelta(days=1)).isoformat()


def make_expense(record_id: str = "1", **overrides) -> Expense:
    """Build a valid expense; keyword overrides replace single fields."""
    fields = {
        "id": record_id,
        "title": f"Expense {record_id}",
        "amount": 12.5,
        "date": YESTERDAY,
        "category": "Food",
        "notes": None,
    }
    fields.update(overrides)
    return Expense(**fields)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.spendsync and SPENDSYNC_* env."""
    home = tmp_path / "spendsync-home"
    monkeypatch.setenv("SPENDSYNC_HOME", str(home))
    for var in (
        "SPENDSYNC_BACKEND_URL",
        "SPENDSYNC_AUTH_TOKEN",
        "SPENDSYNC_PAGE_SIZE",
        "SPENDSYNC_TIMEOUT",
        "SPENDSYNC_DB_PATH",
        "SPENDSYNC_AUTO_SYNC",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def queue_store(kv):
    return DurableQueueStore(kv)


@pytest.fixture
def offline_queue(queue_store):
    return OfflineQueue(queue_store)


@pytest.fixture
def remote():
    return InMemoryRemoteStore()
