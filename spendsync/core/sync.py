"""Synchronization operations for SpendSync."""

import logging
from typing import Any, Dict

from spendsync.types import SyncResult, SyncStatus

logger = logging.getLogger(__name__)


class SyncMixin:
    """Sync operations for SpendSync."""

    def is_online(self) -> bool:
        """True if a remote store is configured and reachable."""
        if self._remote is None:
            return False
        return self._connectivity.online

    def check_connectivity(self) -> bool:
        """Re-probe the remote now. A transition to online triggers a sync
        when auto-sync is bound."""
        if self._remote is None:
            return False
        return self._connectivity.refresh(force=True)

    def current_sync_status(self) -> SyncStatus:
        return self._sync_driver.status

    def trigger_sync(self) -> SyncResult:
        """Drain the offline queue against the remote store.

        A no-op while offline. Success is signalled by an empty queue
        afterwards, not by the status alone.
        """
        result = self._sync_driver.trigger()
        if result.attempted and not result.success:
            logger.warning(
                f"Sync stopped after {result.pushed}/{result.total} actions: {result.errors[:1]}"
            )
        return result

    def sync_summary(self) -> Dict[str, Any]:
        """Get current sync status.

        Returns:
            Pending count, connectivity, driver status and last pass result
        """
        last = self._sync_driver.last_result
        return {
            "pending": len(self._queue),
            "online": self.is_online(),
            "status": self._sync_driver.status.value,
            "last_sync": (
                {
                    "attempted": last.attempted,
                    "pushed": last.pushed,
                    "total": last.total,
                    "success": last.success,
                    "errors": list(last.errors),
                }
                if last
                else None
            ),
        }
