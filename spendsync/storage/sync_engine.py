"""Sync driver for spendsync.

SyncDriver replays the offline queue against the remote store. Actions are
applied one at a time in insertion order and the pass stops at the first
failure, leaving the whole queue in place for the next trigger. Passes are
serialized: a trigger that arrives mid-pass is folded into a single
follow-up pass.
"""

import logging
import threading
from typing import Callable, List, Optional

from spendsync.protocols import RemoteStore, Unsubscribe
from spendsync.types import ActionKind, PendingAction, SyncResult, SyncStatus

from .offline_queue import OfflineQueue

logger = logging.getLogger(__name__)

StatusListener = Callable[[SyncStatus], None]


class SyncDriver:
    """Drains the offline queue against the remote store.

    Args:
        queue: The offline queue to drain.
        remote: Remote store receiving create/replace/remove calls.
        is_online: Returns the current reachability.
        on_success: Called after a fully successful pass, once the queue has
            been cleared (used to invalidate the cached snapshot).
    """

    def __init__(
        self,
        queue: OfflineQueue,
        remote: RemoteStore,
        is_online: Callable[[], bool],
        on_success: Optional[Callable[[], None]] = None,
    ):
        self._queue = queue
        self._remote = remote
        self._is_online = is_online
        self._on_success = on_success
        self._status = SyncStatus.IDLE
        self._listeners: List[StatusListener] = []
        self._lock = threading.Lock()
        self._rerun_requested = False
        self.last_result: Optional[SyncResult] = None

    # === Status ===

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    def subscribe(self, listener: StatusListener) -> Unsubscribe:
        """Register a listener for status transitions."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_status(self, status: SyncStatus):
        if status == self._status:
            return
        logger.debug(f"Sync status {self._status.value} -> {status.value}")
        self._status = status
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.warning(f"Sync status listener failed: {e}", exc_info=True)

    def reset(self):
        """Done -> Idle, on the next user-visible event."""
        if self._status == SyncStatus.DONE:
            self._set_status(SyncStatus.IDLE)

    # === Triggering ===

    def _online(self) -> bool:
        try:
            return bool(self._is_online())
        except Exception as e:
            logger.debug(f"Connectivity check error: {e}", exc_info=True)
            return False

    def trigger(self) -> SyncResult:
        """Run a sync pass, or schedule one follow-up if a pass is running.

        Returns:
            Result of the last pass this call ran that pushed anything. A
            call that only scheduled a follow-up returns an unattempted
            result.
        """
        result = SyncResult()
        while True:
            if not self._lock.acquire(blocking=False):
                self._rerun_requested = True
                logger.debug("Sync already in progress, follow-up pass scheduled")
                return result
            try:
                self._rerun_requested = False
                pass_result = self._run_pass()
            finally:
                self._lock.release()
            # A no-op follow-up does not hide the pass that did the work
            if pass_result.attempted or not result.attempted:
                result = pass_result
            if not self._rerun_requested:
                return result
            logger.debug("Running follow-up sync pass")

    def _apply(self, action: PendingAction):
        if action.kind == ActionKind.ADD:
            self._remote.create(action.payload)
        elif action.kind == ActionKind.UPDATE:
            self._remote.replace(action.record_id, action.payload)
        elif action.kind == ActionKind.DELETE:
            self._remote.remove(action.record_id)
        else:
            raise ValueError(f"Unknown action kind: {action.kind}")

    def _run_pass(self) -> SyncResult:
        result = SyncResult()

        if not self._online():
            logger.info("Offline - sync skipped, changes queued")
            return result

        drained = self._queue.actions
        if not drained:
            logger.debug("Nothing queued, sync skipped")
            return result

        result.attempted = True
        result.total = len(drained)
        self._set_status(SyncStatus.SYNCING)
        logger.debug(f"Pushing {len(drained)} queued actions")

        try:
            for action in drained:
                try:
                    self._apply(action)
                except Exception as e:
                    error_msg = str(e)[:500]
                    logger.error(
                        f"Failed to push {action.kind.value} {action.record_id}: {e} "
                        f"({result.pushed}/{result.total} applied, queue kept)",
                        exc_info=True,
                    )
                    result.failed_action = action
                    result.errors.append(
                        f"Failed to push {action.kind.value} {action.record_id}: {error_msg}"
                    )
                    break
                result.pushed += 1

            if result.success:
                if self._queue.actions == drained:
                    self._queue.clear()
                else:
                    # Queue changed mid-pass; keep what arrived since
                    self._queue.discard(drained)
                if self._on_success:
                    self._on_success()
                logger.info(f"Sync complete: pushed={result.pushed}")
        finally:
            self._set_status(SyncStatus.DONE)
            self.last_result = result

        return result
