"""Cached remote snapshot and optimistic changes.

The last list fetched from the server is kept in memory and mirrored into
the key-value store so it can be shown offline after a restart. Direct
online mutations edit the cached list speculatively; each edit returns an
``OptimisticChange`` holding the prior list so a failed call can restore it.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from spendsync.protocols import KeyValueStore
from spendsync.types import Expense
from spendsync.utils import SNAPSHOT_KEY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimisticChange:
    """A speculative snapshot edit with the value it replaced."""

    operation: str  # 'add', 'update', 'remove'
    record_id: str
    previous: Tuple[Expense, ...] = field(repr=False)


class SnapshotCache:
    """Last known server list, available offline.

    Args:
        kv: Backing key-value store for the durable mirror.
        key: Key holding the serialized snapshot.
    """

    def __init__(self, kv: KeyValueStore, key: str = SNAPSHOT_KEY):
        self._kv = kv
        self.key = key
        self._items: List[Expense] = self._load()
        self.stale = True

    def _load(self) -> List[Expense]:
        try:
            raw = self._kv.get(self.key)
            if raw is None:
                return []
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, list):
                raise ValueError("cached snapshot is not a JSON array")
            return [Expense.from_dict(item) for item in data]
        except Exception as e:
            logger.warning(f"Ignoring unreadable snapshot cache: {e}")
            return []

    def _persist(self) -> None:
        try:
            payload = json.dumps([e.to_dict() for e in self._items]).encode("utf-8")
            self._kv.set(self.key, payload)
        except Exception as e:
            logger.warning(f"Failed to persist snapshot cache: {e}")

    @property
    def items(self) -> List[Expense]:
        return list(self._items)

    def store(self, items: List[Expense]) -> None:
        """Replace the snapshot with a fresh, unfiltered server list."""
        self._items = list(items)
        self.stale = False
        self._persist()

    def invalidate(self) -> None:
        """Mark the snapshot as needing a refetch; contents stay readable."""
        self.stale = True

    def _apply(self, operation: str, record_id: str, items: List[Expense]) -> OptimisticChange:
        change = OptimisticChange(operation, record_id, tuple(self._items))
        self._items = items
        self._persist()
        return change

    def apply_add(self, expense: Expense) -> OptimisticChange:
        items = [expense] + [e for e in self._items if e.id != expense.id]
        return self._apply("add", expense.id, items)

    def apply_update(self, expense: Expense) -> OptimisticChange:
        items = [expense if e.id == expense.id else e for e in self._items]
        return self._apply("update", expense.id, items)

    def apply_remove(self, record_id: str) -> OptimisticChange:
        items = [e for e in self._items if e.id != record_id]
        return self._apply("remove", record_id, items)

    def rollback(self, change: OptimisticChange) -> None:
        logger.debug(f"Rolling back optimistic {change.operation} of {change.record_id}")
        self._items = list(change.previous)
        self._persist()
