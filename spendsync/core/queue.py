"""Offline queue operations for SpendSync."""

import logging
from typing import Tuple

from spendsync.types import Expense, PendingAction

logger = logging.getLogger(__name__)


class QueueMixin:
    """Direct access to the offline queue.

    These bypass the online/offline routing of the writers: the action is
    always queued, to be pushed by the next sync pass.
    """

    def enqueue_add(self, expense: Expense) -> Tuple[PendingAction, ...]:
        expense = self._validate_expense(expense)
        self._sync_driver.reset()
        logger.debug(f"Queued add {expense.id}")
        return self._queue.enqueue_add(expense)

    def enqueue_update(self, expense: Expense) -> Tuple[PendingAction, ...]:
        expense = self._validate_expense(expense)
        self._sync_driver.reset()
        logger.debug(f"Queued update {expense.id}")
        return self._queue.enqueue_update(expense)

    def enqueue_delete(self, record_id: str) -> Tuple[PendingAction, ...]:
        record_id = self._validate_record_id(record_id)
        self._sync_driver.reset()
        logger.debug(f"Queued delete {record_id}")
        return self._queue.enqueue_delete(record_id)

    def pending_actions(self) -> Tuple[PendingAction, ...]:
        """Queued actions in insertion order."""
        return self._queue.actions

    def clear_queue(self) -> None:
        """Drop every pending action without pushing it."""
        logger.warning(f"Discarding {len(self._queue)} pending actions")
        self._queue.clear()
