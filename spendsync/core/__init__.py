"""spendsync core - offline-first expense tracking.

This package provides the main SpendSync class, which routes writes to the
remote store or the offline queue depending on connectivity, builds the
merged list, and drives synchronization.

    from spendsync.core import SpendSync
"""

from spendsync.core.spendsync_class import SpendSync
from spendsync.core.validation import (
    sanitize_number,
    sanitize_string,
    validate_backend_url,
    validate_expense,
)

__all__ = [
    "SpendSync",
    "sanitize_number",
    "sanitize_string",
    "validate_backend_url",
    "validate_expense",
]
