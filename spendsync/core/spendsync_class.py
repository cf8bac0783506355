"""SpendSync class: main interface for offline-capable expense tracking.

This module defines the SpendSync class skeleton, which inherits from the
operation mixins and wires the storage components together.
"""

import logging
import os
from typing import Optional

from spendsync.core.queue import QueueMixin
from spendsync.core.sync import SyncMixin
from spendsync.core.validation import ValidationMixin
from spendsync.core.view import ViewMixin
from spendsync.core.writers import WritersMixin
from spendsync.protocols import ConnectivityProbe, KeyValueStore, RemoteStore
from spendsync.storage import (
    ConnectivityMonitor,
    DurableQueueStore,
    HttpRemoteStore,
    OfflineQueue,
    SnapshotCache,
    SQLiteKeyValueStore,
    SyncDriver,
)
from spendsync.utils import Settings, load_settings, resolve_db_path

logger = logging.getLogger(__name__)


class SpendSync(
    QueueMixin,
    ViewMixin,
    WritersMixin,
    SyncMixin,
    ValidationMixin,
):
    """Main interface for spendsync.

    Examples:
        # Configured from ~/.spendsync/config.json and SPENDSYNC_* env vars
        s = SpendSync()

        # Explicit collaborators (tests, embedding)
        s = SpendSync(kv=MemoryKeyValueStore(), remote=InMemoryRemoteStore())
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        kv: Optional[KeyValueStore] = None,
        remote: Optional[RemoteStore] = None,
        probe: Optional[ConnectivityProbe] = None,
        online: Optional[bool] = None,
        auto_sync: Optional[bool] = None,
    ):
        """Initialize SpendSync.

        Args:
            settings: Runtime settings. If None, loaded from config/env.
            kv: Durable key-value store. Defaults to SQLite at the configured
                database path.
            remote: Remote store. Defaults to an HTTP client when a backend
                URL is configured; without one the instance is offline-only.
            probe: Reachability probe. Defaults to ``remote.ping``.
            online: Force the starting reachability instead of probing.
            auto_sync: Sync on every transition to online (and at startup if
                already online). Defaults to SPENDSYNC_AUTO_SYNC, else True.
        """
        self.settings = settings or load_settings()

        self._kv = kv if kv is not None else SQLiteKeyValueStore(resolve_db_path(self.settings.db_path))

        if remote is None and self.settings.has_backend:
            remote = HttpRemoteStore(
                self.settings.backend_url,
                auth_token=self.settings.auth_token,
                timeout=self.settings.timeout,
            )
        self._remote = remote

        self._queue = OfflineQueue(DurableQueueStore(self._kv))
        self._snapshot = SnapshotCache(self._kv)

        if probe is None and remote is not None:
            probe = remote.ping
        if remote is None:
            online = False
        self._connectivity = ConnectivityMonitor(probe=probe, initial=online)

        self._sync_driver = SyncDriver(
            self._queue,
            self._remote,
            is_online=self.is_online,
            on_success=self._snapshot.invalidate,
        )

        if auto_sync is None:
            auto_sync_env = os.environ.get("SPENDSYNC_AUTO_SYNC", "").lower()
            auto_sync = auto_sync_env not in ("false", "0", "no", "off")
        self._auto_sync = auto_sync
        self._unbind_sync = None
        if self._auto_sync and self._remote is not None:
            self._unbind_sync = self._connectivity.bind_sync(self._sync_driver)

        logger.debug(
            f"SpendSync initialized with remote: {type(self._remote).__name__}, "
            f"pending: {len(self._queue)}, auto_sync: {self._auto_sync}"
        )

    @property
    def connectivity(self) -> ConnectivityMonitor:
        return self._connectivity

    @property
    def sync_driver(self) -> SyncDriver:
        return self._sync_driver

    def close(self):
        """Unbind auto-sync and release the HTTP client."""
        if self._unbind_sync:
            self._unbind_sync()
            self._unbind_sync = None
        if isinstance(self._remote, HttpRemoteStore):
            self._remote.close()
