"""
Shared types for spendsync.

The expense record, the pending-action variant stored in the offline queue,
and the small result types passed between the queue, the merge engine and the
sync driver all live here. They are the contract between storage, core and
CLI.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# === Shared Utility Functions ===


def utc_now() -> str:
    """Get current timestamp as ISO string in UTC."""
    return datetime.now(timezone.utc).isoformat()


def new_expense_id() -> str:
    """Client-assigned expense id (millisecond timestamp)."""
    return str(int(time.time() * 1000))


# === Enums ===


class ActionKind(str, Enum):
    """Kind of a queued local mutation."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class SyncStatus(str, Enum):
    """Status of the sync driver. Cyclic: idle -> syncing -> done -> idle."""

    IDLE = "idle"
    SYNCING = "syncing"
    DONE = "done"


# === Records ===

_EXPENSE_FIELDS = ("id", "title", "amount", "date", "category")


@dataclass(frozen=True)
class Expense:
    """A single expense record. Identity is ``id``."""

    id: str
    title: str
    amount: float
    date: str  # YYYY-MM-DD
    category: str
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "date": self.date,
            "category": self.category,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Expense":
        """Build an Expense from its wire shape.

        Only the shape is checked here (keys present, types right). Business
        rules such as a positive amount live in
        :func:`spendsync.core.validation.validate_expense`.

        Raises:
            ValueError: If the payload is not a well-typed expense dict.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expense payload must be an object, got {type(data).__name__}")

        missing = [key for key in _EXPENSE_FIELDS if key not in data]
        if missing:
            raise ValueError(f"Expense payload missing fields: {', '.join(missing)}")

        # Servers commonly hand back numeric ids
        record_id = data["id"]
        if isinstance(record_id, int) and not isinstance(record_id, bool):
            record_id = str(record_id)
        if not isinstance(record_id, str):
            raise ValueError("Expense id must be a string")

        amount = data["amount"]
        if isinstance(amount, str):
            try:
                amount = float(amount)
            except ValueError as e:
                raise ValueError(f"Expense amount is not a number: {amount!r}") from e
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise ValueError("Expense amount must be a number")

        for key in ("title", "date", "category"):
            if not isinstance(data[key], str):
                raise ValueError(f"Expense {key} must be a string")

        notes = data.get("notes")
        if notes is not None and not isinstance(notes, str):
            raise ValueError("Expense notes must be a string")

        return cls(
            id=record_id,
            title=data["title"],
            amount=float(amount),
            date=data["date"],
            category=data["category"],
            notes=notes,
        )


@dataclass(frozen=True)
class PendingAction:
    """One queued local mutation not yet confirmed by the remote store.

    ``payload`` is an :class:`Expense` for add/update and the record id for
    delete.
    """

    kind: ActionKind
    payload: Union[Expense, str]

    @classmethod
    def add(cls, expense: Expense) -> "PendingAction":
        return cls(ActionKind.ADD, expense)

    @classmethod
    def update(cls, expense: Expense) -> "PendingAction":
        return cls(ActionKind.UPDATE, expense)

    @classmethod
    def delete(cls, record_id: str) -> "PendingAction":
        return cls(ActionKind.DELETE, record_id)

    @property
    def record_id(self) -> str:
        if isinstance(self.payload, Expense):
            return self.payload.id
        return self.payload

    @property
    def expense(self) -> Optional[Expense]:
        return self.payload if isinstance(self.payload, Expense) else None

    def to_dict(self) -> Dict[str, Any]:
        payload = self.payload.to_dict() if isinstance(self.payload, Expense) else self.payload
        return {"kind": self.kind.value, "payload": payload}

    @classmethod
    def from_dict(cls, data: Any) -> "PendingAction":
        """Parse a persisted ``{"kind", "payload"}`` entry.

        Raises:
            ValueError: On unknown kind or a payload of the wrong shape.
        """
        if not isinstance(data, dict):
            raise ValueError("Pending action must be an object")
        try:
            kind = ActionKind(data.get("kind"))
        except ValueError as e:
            raise ValueError(f"Unknown pending action kind: {data.get('kind')!r}") from e

        payload = data.get("payload")
        if kind == ActionKind.DELETE:
            if not isinstance(payload, str) or not payload:
                raise ValueError("Delete payload must be a non-empty id string")
            return cls(kind, payload)
        return cls(kind, Expense.from_dict(payload))


# === Results ===


@dataclass
class RemotePage:
    """One page of expenses returned by the remote store."""

    items: List[Expense] = field(default_factory=list)
    total: int = 0


@dataclass
class Page:
    """A window over the merged view ("load more" by slicing)."""

    items: List[Expense]
    page: int
    page_size: int
    total: int

    @property
    def has_more(self) -> bool:
        return len(self.items) < self.total


@dataclass
class SyncResult:
    """Result of one drain pass."""

    attempted: bool = False
    pushed: int = 0  # Actions applied remotely
    total: int = 0  # Actions in the queue when the pass started
    failed_action: Optional[PendingAction] = None
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.attempted and len(self.errors) == 0

    @property
    def remaining(self) -> int:
        """Actions still waiting for a later pass."""
        return self.total - self.pushed if not self.success else 0
