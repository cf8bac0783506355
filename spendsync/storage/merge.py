"""Merge engine.

Folds the pending queue over a remote snapshot to produce the list the user
sees, without a server round-trip. Filtering, sorting and "load more"
windowing are layered on top of the merged list.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from spendsync.types import ActionKind, Expense, Page, PendingAction

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"

SORT_KEYS = ("date_desc", "date_asc", "amount_desc", "amount_asc")
DEFAULT_SORT = "date_desc"


def merged_view(snapshot: Iterable[Expense], queue: Iterable[PendingAction]) -> List[Expense]:
    """Combine a remote snapshot with the pending queue.

    1. Partition the queue into adds, updates by id and deleted ids.
    2. Drop snapshot records that are queued for deletion.
    3. Substitute queued updates in place (position preserved).
    4. Prepend adds, newest first.
    5. Deduplicate by id; the first occurrence wins.

    Args:
        snapshot: Remote records, already filtered and sorted.
        queue: Pending actions in insertion order.

    Returns:
        The records to display.
    """
    adds: List[Expense] = []
    update_by_id: Dict[str, Expense] = {}
    deleted_ids: Set[str] = set()

    for action in queue:
        if action.kind == ActionKind.ADD:
            adds.append(action.payload)
        elif action.kind == ActionKind.UPDATE:
            update_by_id[action.record_id] = action.payload
        elif action.kind == ActionKind.DELETE:
            deleted_ids.add(action.record_id)

    remote = [
        update_by_id.get(expense.id, expense)
        for expense in snapshot
        if expense.id not in deleted_ids
    ]

    seen: Set[str] = set()
    merged: List[Expense] = []
    for expense in list(reversed(adds)) + remote:
        if expense.id in seen:
            logger.debug(f"Merge dropped duplicate id {expense.id}")
            continue
        seen.add(expense.id)
        merged.append(expense)
    return merged


def pending_ids(queue: Iterable[PendingAction]) -> Set[str]:
    """Ids whose displayed state is not yet confirmed by the server."""
    return {action.record_id for action in queue if action.kind != ActionKind.DELETE}


def filter_by_category(expenses: Iterable[Expense], category: Optional[str]) -> List[Expense]:
    """Keep expenses in ``category``. ``None`` or ``"All"`` keeps everything."""
    if not category or category == ALL_CATEGORIES:
        return list(expenses)
    return [e for e in expenses if e.category == category]


def sort_expenses(expenses: Iterable[Expense], sort_key: str = DEFAULT_SORT) -> List[Expense]:
    """Stable sort by one of SORT_KEYS.

    Raises:
        ValueError: On an unknown sort key.
    """
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key {sort_key!r} (expected one of {', '.join(SORT_KEYS)})")

    field, direction = sort_key.split("_")
    # ISO dates sort lexicographically
    return sorted(expenses, key=lambda e: getattr(e, field), reverse=direction == "desc")


def paginate(expenses: Sequence[Expense], page: int, page_size: int) -> Page:
    """Cumulative window over ``expenses`` for pages 1..page.

    Raises:
        ValueError: If page or page_size is not positive.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return Page(
        items=list(expenses[: page * page_size]),
        page=page,
        page_size=page_size,
        total=len(expenses),
    )
