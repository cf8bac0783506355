"""Input validation for spendsync.

Provides standalone helpers shared by the core, the config loader and the
CLI, plus the ``ValidationMixin`` used by :class:`~spendsync.core.SpendSync`.

- ``sanitize_string``: string validation + control-char stripping
- ``sanitize_number``: numeric validation + NaN/Infinity rejection
- ``validate_expense``: the expense rules checked before anything is queued
- ``validate_backend_url``: refuses backends that would leak the auth token
"""

import logging
import math
import re
from dataclasses import replace
from datetime import date
from typing import Any, Optional
from urllib.parse import urlparse

from spendsync.protocols import ExpenseValidationError
from spendsync.types import Expense

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 200
MAX_CATEGORY_LENGTH = 100
MAX_NOTES_LENGTH = 200


def sanitize_string(
    value: Any, field_name: str, max_length: int = 1000, required: bool = True
) -> str:
    """Sanitize and validate string inputs.

    Args:
        value: The value to sanitize.
        field_name: Name of the field for error messages.
        max_length: Maximum allowed string length.
        required: If True, empty strings are rejected.

    Returns:
        Sanitized string.

    Raises:
        ValueError: If validation fails.
    """
    if value is None and not required:
        return ""

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string, got {type(value).__name__}")

    if required and not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"{field_name} too long (max {max_length} characters, got {len(value)})")

    # Remove null bytes and control characters except newlines and tabs
    sanitized = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)

    return sanitized


def sanitize_number(
    value: Any,
    field_name: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    exclusive_min: bool = False,
) -> float:
    """Validate numeric inputs, rejecting NaN and Infinity.

    Raises:
        ValueError: If validation fails.
    """
    if value is None:
        raise ValueError(f"{field_name} is required")

    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a number, got bool")

    if not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number, got {type(value).__name__}")

    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        raise ValueError(f"{field_name} must be a finite number, got {value}")

    if min_val is not None:
        if exclusive_min and value <= min_val:
            raise ValueError(f"{field_name} must be greater than {min_val}, got {value}")
        if not exclusive_min and value < min_val:
            raise ValueError(f"{field_name} must be >= {min_val}, got {value}")

    if max_val is not None and value > max_val:
        raise ValueError(f"{field_name} must be <= {max_val}, got {value}")

    return float(value)


def parse_expense_date(value: str) -> date:
    """Parse a YYYY-MM-DD date."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"date must be YYYY-MM-DD, got {value!r}") from e


def validate_expense(expense: Expense, today: Optional[date] = None) -> Expense:
    """Check an expense against the entry rules.

    Rules: title of at least 3 characters, amount > 0, date not in the
    future, non-empty category, notes at most 200 characters.

    Args:
        expense: The record to check.
        today: Reference date for the "not in the future" rule.

    Returns:
        The expense with control characters stripped from its text fields.

    Raises:
        ExpenseValidationError: Naming the first field that fails.
    """
    today = today or date.today()

    def check(field_name, fn):
        try:
            return fn()
        except ValueError as e:
            raise ExpenseValidationError(field_name, str(e)) from e

    check("id", lambda: sanitize_string(expense.id, "id", 100))
    title = check("title", lambda: sanitize_string(expense.title, "title", MAX_TITLE_LENGTH))
    if len(title.strip()) < MIN_TITLE_LENGTH:
        raise ExpenseValidationError("title", f"must be at least {MIN_TITLE_LENGTH} characters")

    amount = check("amount", lambda: sanitize_number(expense.amount, "amount", 0, exclusive_min=True))

    expense_date = check("date", lambda: parse_expense_date(expense.date))
    if expense_date > today:
        raise ExpenseValidationError("date", "cannot be in the future")

    category = check(
        "category", lambda: sanitize_string(expense.category, "category", MAX_CATEGORY_LENGTH)
    )
    notes = check(
        "notes",
        lambda: sanitize_string(expense.notes, "notes", MAX_NOTES_LENGTH, required=False),
    )

    return replace(
        expense,
        title=title.strip(),
        amount=amount,
        category=category.strip(),
        notes=notes or None,
    )


LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1"})


def validate_backend_url(url: Optional[str]) -> Optional[str]:
    """Check that the auth token can be sent to ``url``.

    https is required except for a backend on this machine.

    Returns:
        The URL, or None (with a warning) if it is not usable.
    """
    if not url:
        return None

    parsed = urlparse(url)
    if not parsed.hostname:
        logger.warning(f"Ignoring backend_url without a host: {url!r}")
        return None
    if parsed.scheme == "https":
        return url
    if parsed.scheme == "http" and parsed.hostname in LOCAL_HOSTS:
        return url

    logger.warning(f"Ignoring backend_url {url!r}: https required for non-local hosts")
    return None


class ValidationMixin:
    """Input validation operations for SpendSync."""

    def _validate_expense(self, expense: Expense) -> Expense:
        return validate_expense(expense, today=self._today())

    def _validate_record_id(self, record_id: str) -> str:
        try:
            return sanitize_string(record_id, "id", 100).strip()
        except ValueError as e:
            raise ExpenseValidationError("id", str(e)) from e

    def _today(self) -> date:
        return date.today()
