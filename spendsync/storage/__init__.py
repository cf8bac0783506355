"""spendsync storage layer.

Local-first: pending edits live in an offline queue mirrored to a durable
key-value store, and are replayed against the remote store by the sync
driver when connectivity returns.
"""

from .connectivity import ConnectivityMonitor
from .kv import MemoryKeyValueStore, SQLiteKeyValueStore
from .merge import (
    ALL_CATEGORIES,
    DEFAULT_SORT,
    SORT_KEYS,
    filter_by_category,
    merged_view,
    paginate,
    pending_ids,
    sort_expenses,
)
from .offline_queue import OfflineQueue, enqueue_add, enqueue_delete, enqueue_update
from .queue_store import DurableQueueStore
from .remote import HttpRemoteStore, InMemoryRemoteStore
from .snapshot import OptimisticChange, SnapshotCache
from .sync_engine import SyncDriver

__all__ = [
    # Durable storage
    "SQLiteKeyValueStore",
    "MemoryKeyValueStore",
    "DurableQueueStore",
    # Queue
    "OfflineQueue",
    "enqueue_add",
    "enqueue_update",
    "enqueue_delete",
    # Merge
    "merged_view",
    "pending_ids",
    "filter_by_category",
    "sort_expenses",
    "paginate",
    "ALL_CATEGORIES",
    "SORT_KEYS",
    "DEFAULT_SORT",
    # Remote
    "HttpRemoteStore",
    "InMemoryRemoteStore",
    "SnapshotCache",
    "OptimisticChange",
    # Sync
    "SyncDriver",
    "ConnectivityMonitor",
]
