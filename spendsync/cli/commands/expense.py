"""Expense commands for the spendsync CLI: add, update, delete, list, queue."""

import json
import logging
from typing import TYPE_CHECKING

from spendsync.cli.commands.helpers import format_expense
from spendsync.types import Expense, new_expense_id

if TYPE_CHECKING:
    from spendsync import SpendSync

logger = logging.getLogger(__name__)


def _expense_from_args(args, record_id: str) -> Expense:
    return Expense(
        id=record_id,
        title=args.title,
        amount=args.amount,
        date=args.date,
        category=args.category,
        notes=args.notes,
    )


def cmd_add(args, s: "SpendSync"):
    """Create an expense (queued when offline)."""
    expense = _expense_from_args(args, args.id or new_expense_id())
    online = s.is_online()
    saved = s.add_expense(expense)
    if args.json:
        print(json.dumps(saved.to_dict(), indent=2))
    else:
        where = "" if online else " (offline, will sync later)"
        print(f"✓ Added {saved.id}{where}")


def cmd_update(args, s: "SpendSync"):
    """Replace an existing expense (queued when offline)."""
    expense = _expense_from_args(args, args.id)
    online = s.is_online()
    saved = s.update_expense(expense)
    if args.json:
        print(json.dumps(saved.to_dict(), indent=2))
    else:
        where = "" if online else " (offline, will sync later)"
        print(f"✓ Updated {saved.id}{where}")


def cmd_delete(args, s: "SpendSync"):
    """Delete an expense (queued when offline)."""
    online = s.is_online()
    s.delete_expense(args.id)
    where = "" if online else " (offline, will sync later)"
    print(f"✓ Deleted {args.id}{where}")


def cmd_list(args, s: "SpendSync"):
    """Show the merged expense list."""
    page = s.list_expenses(
        category=args.category,
        sort=args.sort,
        page=args.page,
        page_size=args.page_size,
    )
    pending = s.pending_ids()

    if args.json:
        output = {
            "items": [dict(e.to_dict(), pending=e.id in pending) for e in page.items],
            "total": page.total,
            "has_more": page.has_more,
        }
        print(json.dumps(output, indent=2))
        return

    if not page.items:
        print("No expenses found.")
        return

    for expense in page.items:
        print(format_expense(expense, pending=expense.id in pending))
    print(f"\nShowing {len(page.items)} of {page.total}")
    if page.has_more:
        print(f"  More available: --page {page.page + 1}")


def cmd_queue(args, s: "SpendSync"):
    """Show pending offline actions."""
    actions = s.pending_actions()
    if args.json:
        print(json.dumps([a.to_dict() for a in actions], indent=2))
        return

    if not actions:
        print("No pending changes.")
        return

    print(f"Pending changes ({len(actions)}):")
    for action in actions:
        detail = f" {action.expense.title}" if action.expense else ""
        print(f"  {action.kind.value:<7} {action.record_id}{detail}")
