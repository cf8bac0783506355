"""Write operations for SpendSync.

Online, a write goes straight to the remote store with an optimistic edit of
the cached snapshot that is rolled back if the call fails. Offline, or when
the record already has a queued action that the server has not seen yet,
the write is queued instead.
"""

import logging

from spendsync.protocols import RemoteStoreError
from spendsync.types import Expense

logger = logging.getLogger(__name__)


class WritersMixin:
    """Routed create/update/delete for SpendSync."""

    def _should_queue(self, record_id: str) -> bool:
        if not self.is_online():
            return True
        # Keep per-record ordering: a direct call must not overtake a queued one
        return self._queue.pending_for(record_id) is not None

    def _after_queued(self, verb: str, record_id: str):
        if self.is_online():
            logger.info(f"{verb} {record_id} behind pending changes, syncing")
            self._sync_driver.trigger()
        else:
            logger.info(f"{verb} {record_id} locally (offline)")

    def add_expense(self, expense: Expense) -> Expense:
        """Create an expense.

        Raises:
            ExpenseValidationError: If the expense is invalid.
            RemoteStoreError: If the direct remote call fails (the snapshot
                edit is rolled back first).
        """
        expense = self._validate_expense(expense)
        self._sync_driver.reset()

        if self._should_queue(expense.id):
            self._queue.enqueue_add(expense)
            self._after_queued("Added", expense.id)
            return expense

        change = self._snapshot.apply_add(expense)
        try:
            created = self._remote.create(expense)
        except RemoteStoreError:
            self._snapshot.rollback(change)
            raise
        self._snapshot.invalidate()
        return created

    def update_expense(self, expense: Expense) -> Expense:
        """Replace an expense. Same routing and errors as :meth:`add_expense`."""
        expense = self._validate_expense(expense)
        self._sync_driver.reset()

        if self._should_queue(expense.id):
            self._queue.enqueue_update(expense)
            self._after_queued("Updated", expense.id)
            return expense

        change = self._snapshot.apply_update(expense)
        try:
            updated = self._remote.replace(expense.id, expense)
        except RemoteStoreError:
            self._snapshot.rollback(change)
            raise
        self._snapshot.invalidate()
        return updated

    def delete_expense(self, record_id: str) -> None:
        """Delete an expense. Same routing and errors as :meth:`add_expense`."""
        record_id = self._validate_record_id(record_id)
        self._sync_driver.reset()

        if self._should_queue(record_id):
            self._queue.enqueue_delete(record_id)
            self._after_queued("Deleted", record_id)
            return

        change = self._snapshot.apply_remove(record_id)
        try:
            self._remote.remove(record_id)
        except RemoteStoreError:
            self._snapshot.rollback(change)
            raise
        self._snapshot.invalidate()
