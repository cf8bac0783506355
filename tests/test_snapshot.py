"""Tests for the cached remote snapshot.

Tests:
- store() replaces contents and clears staleness
- Optimistic add/update/remove and rollback to the prior list
- Durable mirror survives a restart; unreadable data loads as empty
"""

import json
from unittest.mock import MagicMock

import pytest

from conftest import make_expense
from spendsync.storage import MemoryKeyValueStore, SnapshotCache
from spendsync.utils import SNAPSHOT_KEY


class TestStore:
    def test_starts_empty_and_stale(self, kv):
        cache = SnapshotCache(kv)
        assert cache.items == []
        assert cache.stale is True

    def test_store_marks_fresh(self, kv):
        cache = SnapshotCache(kv)
        cache.store([make_expense("1")])
        assert [e.id for e in cache.items] == ["1"]
        assert cache.stale is False

    def test_invalidate_keeps_contents(self, kv):
        cache = SnapshotCache(kv)
        cache.store([make_expense("1")])
        cache.invalidate()
        assert cache.stale is True
        assert [e.id for e in cache.items] == ["1"]

    def test_items_is_a_copy(self, kv):
        cache = SnapshotCache(kv)
        cache.store([make_expense("1")])
        cache.items.append(make_expense("2"))
        assert len(cache.items) == 1


class TestOptimisticChanges:
    @pytest.fixture
    def cache(self, kv):
        cache = SnapshotCache(kv)
        cache.store([make_expense("1"), make_expense("2")])
        return cache

    def test_add_prepends(self, cache):
        cache.apply_add(make_expense("3"))
        assert [e.id for e in cache.items] == ["3", "1", "2"]

    def test_add_existing_id_moves_to_front(self, cache):
        cache.apply_add(make_expense("2", title="Moved"))
        assert [e.id for e in cache.items] == ["2", "1"]
        assert cache.items[0].title == "Moved"

    def test_update_in_place(self, cache):
        cache.apply_update(make_expense("2", amount=99.0))
        assert [e.id for e in cache.items] == ["1", "2"]
        assert cache.items[1].amount == 99.0

    def test_remove(self, cache):
        cache.apply_remove("1")
        assert [e.id for e in cache.items] == ["2"]

    @pytest.mark.parametrize(
        "apply",
        [
            lambda c: c.apply_add(make_expense("3")),
            lambda c: c.apply_update(make_expense("1", title="Changed")),
            lambda c: c.apply_remove("2"),
        ],
    )
    def test_rollback_restores_previous(self, cache, apply):
        before = cache.items
        change = apply(cache)
        assert cache.items != before
        cache.rollback(change)
        assert cache.items == before

    def test_changes_are_persisted(self, kv, cache):
        cache.apply_remove("1")
        assert [e.id for e in SnapshotCache(kv).items] == ["2"]


class TestPersistence:
    def test_survives_restart(self):
        kv = MemoryKeyValueStore()
        SnapshotCache(kv).store([make_expense("1", notes="kept")])

        reloaded = SnapshotCache(kv)
        assert reloaded.items == [make_expense("1", notes="kept")]
        # A reloaded snapshot still needs a refetch when online
        assert reloaded.stale is True

    def test_stored_under_snapshot_key(self, kv):
        SnapshotCache(kv).store([make_expense("1")])
        assert json.loads(kv.get(SNAPSHOT_KEY)) == [make_expense("1").to_dict()]

    @pytest.mark.parametrize("raw", [b"not json", b'{"id": "1"}', b'[{"id": "1"}]', b"\xff\xfe"])
    def test_unreadable_loads_empty(self, raw):
        kv = MemoryKeyValueStore({SNAPSHOT_KEY: raw})
        assert SnapshotCache(kv).items == []

    def test_failed_write_keeps_memory_copy(self):
        kv = MagicMock()
        kv.get.return_value = None
        kv.set.side_effect = OSError("disk full")

        cache = SnapshotCache(kv)
        cache.store([make_expense("1")])
        assert [e.id for e in cache.items] == ["1"]
