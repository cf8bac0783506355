"""Durable mirror of the offline queue.

Best-effort persistence: reads fall back to an empty queue and writes that
fail are logged and dropped. The in-memory queue stays authoritative for the
running process either way.
"""

import json
import logging
from typing import List, Sequence

from spendsync.protocols import KeyValueStore
from spendsync.types import PendingAction
from spendsync.utils import QUEUE_KEY

logger = logging.getLogger(__name__)


def serialize_queue(queue: Sequence[PendingAction]) -> bytes:
    return json.dumps([action.to_dict() for action in queue]).encode("utf-8")


def deserialize_queue(raw: bytes) -> List[PendingAction]:
    """Decode a persisted queue.

    Raises:
        ValueError: If the payload is not a JSON array of well-formed actions.
    """
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, list):
        raise ValueError("Persisted queue must be a JSON array")
    return [PendingAction.from_dict(entry) for entry in data]


class DurableQueueStore:
    """Persists the pending-action queue under a single key.

    Args:
        kv: Backing key-value store.
        key: Key holding the serialized queue.
    """

    def __init__(self, kv: KeyValueStore, key: str = QUEUE_KEY):
        self._kv = kv
        self.key = key

    def load(self) -> List[PendingAction]:
        """Read the persisted queue. Never raises; returns [] on any fault."""
        try:
            raw = self._kv.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read offline queue, starting empty: {e}")
            return []

        if raw is None:
            return []

        try:
            queue = deserialize_queue(raw)
        except (UnicodeDecodeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Discarding malformed offline queue: {e}")
            return []

        logger.debug(f"Loaded {len(queue)} pending actions")
        return queue

    def save(self, queue: Sequence[PendingAction]) -> None:
        """Persist the full queue. Failures are logged and swallowed."""
        try:
            self._kv.set(self.key, serialize_queue(queue))
        except Exception as e:
            logger.warning(f"Failed to persist offline queue ({len(queue)} actions): {e}")

    def clear(self) -> None:
        try:
            self._kv.delete(self.key)
        except Exception as e:
            logger.warning(f"Failed to clear persisted offline queue: {e}")
