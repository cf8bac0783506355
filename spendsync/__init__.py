"""
spendsync - Offline-first expense tracking.

Record expenses while disconnected; pending edits are reconciled with the
server when connectivity returns.
"""

from .core import SpendSync
from .protocols import ExpenseValidationError, RemoteStoreError, SpendSyncError
from .types import ActionKind, Expense, PendingAction, SyncResult, SyncStatus, new_expense_id

try:
    from importlib.metadata import version

    __version__ = version("spendsync")
except Exception:
    __version__ = "0.0.0"

__all__ = [
    "SpendSync",
    "Expense",
    "PendingAction",
    "ActionKind",
    "SyncStatus",
    "SyncResult",
    "SpendSyncError",
    "RemoteStoreError",
    "ExpenseValidationError",
    "new_expense_id",
]
