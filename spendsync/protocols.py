"""
spendsync Protocol Definitions
==============================

Interface contracts for the collaborators the offline core consumes.

Components and their roles:
- Remote store:   The server of record. Reached over request/response calls.
- Key-value store: Local durable storage for the pending queue and the
                   last fetched snapshot.
- Connectivity probe: Answers "is the remote currently reachable?".

Error handling philosophy:
- Remote faults raise RemoteStoreError; the sync driver treats any of them
  as the end of the current drain pass
- Invalid records raise ExpenseValidationError before anything is queued
- Key-value store failures may raise anything; callers in the storage layer
  catch, log and continue with in-memory state
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

from spendsync.types import Expense, RemotePage

# =============================================================================
# ERRORS
# =============================================================================


class SpendSyncError(Exception):
    """Base for all spendsync errors."""

    pass


class RemoteStoreError(SpendSyncError):
    """Raised when a remote call fails (network fault or non-success status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExpenseValidationError(SpendSyncError, ValueError):
    """Raised when an expense fails validation. ``field`` names the culprit."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


# =============================================================================
# COLLABORATOR PROTOCOLS
# =============================================================================


@runtime_checkable
class RemoteStore(Protocol):
    """Server of record for expenses.

    Every call must be safely retryable: a drain pass that fails midway is
    replayed from the start on the next trigger, so re-creating an existing
    id, re-replacing the same payload and re-removing a missing id must all
    succeed or be no-ops upstream.
    """

    def create(self, expense: Expense) -> Expense:
        ...

    def replace(self, record_id: str, expense: Expense) -> Expense:
        ...

    def remove(self, record_id: str) -> None:
        ...

    def list(self, page: int, page_size: int, category: Optional[str] = None) -> RemotePage:
        ...

    def ping(self) -> bool:
        """True if the remote answers a health check."""
        ...


@runtime_checkable
class KeyValueStore(Protocol):
    """Local durable key-value storage (best-effort)."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


# Reachability probe: returns True when the remote is reachable
ConnectivityProbe = Callable[[], bool]

# Handler receiving the new reachability on each transition
ReachabilityHandler = Callable[[bool], None]

# Returned by every subscribe(); calling it removes the handler
Unsubscribe = Callable[[], None]

__all__ = [
    "SpendSyncError",
    "RemoteStoreError",
    "ExpenseValidationError",
    "RemoteStore",
    "KeyValueStore",
    "ConnectivityProbe",
    "ReachabilityHandler",
    "Unsubscribe",
]
