"""Offline action queue.

Pending local mutations are kept in insertion order with at most one action
per record id. The collapse rules live in the pure ``enqueue_*`` functions;
``OfflineQueue`` owns the current list and mirrors every change into the
durable store before returning.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from spendsync.types import ActionKind, Expense, PendingAction

from .queue_store import DurableQueueStore

logger = logging.getLogger(__name__)


def _without(queue: Sequence[PendingAction], record_id: str, *kinds: ActionKind) -> List[PendingAction]:
    return [a for a in queue if not (a.kind in kinds and a.record_id == record_id)]


def enqueue_add(queue: Sequence[PendingAction], expense: Expense) -> List[PendingAction]:
    """Queue an add. Supersedes any queued update or delete for the id."""
    result = _without(queue, expense.id, ActionKind.DELETE, ActionKind.UPDATE, ActionKind.ADD)
    result.append(PendingAction.add(expense))
    return result


def enqueue_update(queue: Sequence[PendingAction], expense: Expense) -> List[PendingAction]:
    """Queue an update.

    An add for the same id absorbs the new payload in place and stays an
    add. A queued delete wins and the update is dropped.
    """
    result = list(queue)
    for i, action in enumerate(result):
        if action.kind == ActionKind.ADD and action.record_id == expense.id:
            result[i] = PendingAction.add(expense)
            return result

    result = _without(result, expense.id, ActionKind.UPDATE)
    if any(a.kind == ActionKind.DELETE and a.record_id == expense.id for a in result):
        logger.debug(f"Dropping update for {expense.id}: delete already queued")
        return result

    result.append(PendingAction.update(expense))
    return result


def enqueue_delete(queue: Sequence[PendingAction], record_id: str) -> List[PendingAction]:
    """Queue a delete.

    A never-synced add vanishes, a queued update is discarded, and a second
    delete for the same id is a no-op.
    """
    result = _without(queue, record_id, ActionKind.ADD, ActionKind.UPDATE)
    if not any(a.kind == ActionKind.DELETE and a.record_id == record_id for a in result):
        result.append(PendingAction.delete(record_id))
    return result


class OfflineQueue:
    """Owner of the pending-action queue.

    Loaded once from the durable store at construction. Every mutation is
    persisted synchronously; a failed save leaves the in-memory queue as the
    source of truth.

    Args:
        store: Durable mirror of the queue.
    """

    def __init__(self, store: DurableQueueStore):
        self._store = store
        self._actions: List[PendingAction] = store.load()

    @property
    def actions(self) -> Tuple[PendingAction, ...]:
        return tuple(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[PendingAction]:
        return iter(tuple(self._actions))

    def is_empty(self) -> bool:
        return not self._actions

    def pending_for(self, record_id: str) -> Optional[PendingAction]:
        """The queued action for ``record_id``, if any."""
        for action in self._actions:
            if action.record_id == record_id:
                return action
        return None

    def _replace(self, actions: List[PendingAction]) -> Tuple[PendingAction, ...]:
        self._actions = actions
        self._store.save(actions)
        return tuple(actions)

    def enqueue_add(self, expense: Expense) -> Tuple[PendingAction, ...]:
        return self._replace(enqueue_add(self._actions, expense))

    def enqueue_update(self, expense: Expense) -> Tuple[PendingAction, ...]:
        return self._replace(enqueue_update(self._actions, expense))

    def enqueue_delete(self, record_id: str) -> Tuple[PendingAction, ...]:
        return self._replace(enqueue_delete(self._actions, record_id))

    def clear(self) -> None:
        """Empty the queue and its durable mirror."""
        self._actions = []
        self._store.clear()

    def discard(self, applied: Iterable[PendingAction]) -> Tuple[PendingAction, ...]:
        """Remove exactly the given actions, leaving anything queued since."""
        applied = list(applied)
        remaining = [a for a in self._actions if a not in applied]
        if len(remaining) == len(self._actions):
            return tuple(self._actions)
        if not remaining:
            self.clear()
            return ()
        return self._replace(remaining)
