"""
spendsync CLI - offline-first expense tracking.

Usage:
    spendsync add TITLE AMOUNT CATEGORY [--date D] [--notes N]
    spendsync update ID TITLE AMOUNT CATEGORY [--date D] [--notes N]
    spendsync delete ID
    spendsync list [--category C] [--sort KEY] [--page N]
    spendsync queue
    spendsync sync
    spendsync status
    spendsync watch [--interval S]
"""

import argparse
import logging
import sys
from datetime import date

from spendsync import SpendSync
from spendsync.cli.commands import (
    cmd_add,
    cmd_delete,
    cmd_list,
    cmd_queue,
    cmd_status,
    cmd_sync,
    cmd_update,
    cmd_watch,
)
from spendsync.protocols import RemoteStoreError
from spendsync.storage.merge import DEFAULT_SORT, SORT_KEYS

# Set up logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)


def _add_expense_fields(parser):
    parser.add_argument("title", help="What the money was spent on")
    parser.add_argument("amount", type=float, help="Amount (> 0)")
    parser.add_argument("category", help="Category (e.g. Food, Travel, Shopping)")
    parser.add_argument("--date", "-d", default=date.today().isoformat(), help="YYYY-MM-DD (default: today)")
    parser.add_argument("--notes", "-n", help="Notes (max 200 characters)")
    parser.add_argument("--json", "-j", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spendsync",
        description="Offline-first expense tracking",
    )
    parser.add_argument("--offline", action="store_true", help="Do not contact the backend")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # add
    p_add = subparsers.add_parser("add", help="Add an expense")
    _add_expense_fields(p_add)
    p_add.add_argument("--id", help="Explicit expense id (default: generated)")

    # update
    p_update = subparsers.add_parser("update", help="Replace an expense")
    p_update.add_argument("id", help="Expense id")
    _add_expense_fields(p_update)

    # delete
    p_delete = subparsers.add_parser("delete", help="Delete an expense")
    p_delete.add_argument("id", help="Expense id")

    # list
    p_list = subparsers.add_parser("list", help="List expenses (server + pending changes)")
    p_list.add_argument("--category", "-c", default=None, help="Category filter (default: All)")
    p_list.add_argument("--sort", "-s", choices=SORT_KEYS, default=DEFAULT_SORT)
    p_list.add_argument("--page", "-p", type=int, default=1, help="Show pages 1..N")
    p_list.add_argument("--page-size", type=int, default=None)
    p_list.add_argument("--json", "-j", action="store_true")

    # queue
    p_queue = subparsers.add_parser("queue", help="Show pending offline changes")
    p_queue.add_argument("--json", "-j", action="store_true")

    # sync
    p_sync = subparsers.add_parser("sync", help="Push pending changes now")
    p_sync.add_argument("--json", "-j", action="store_true")

    # status
    p_status = subparsers.add_parser("status", help="Connectivity and sync status")
    p_status.add_argument("--json", "-j", action="store_true")

    # watch
    p_watch = subparsers.add_parser("watch", help="Sync whenever connectivity returns")
    p_watch.add_argument("--interval", "-i", type=float, default=10.0, help="Seconds between checks")
    p_watch.add_argument("--count", type=int, default=None, help="Stop after N checks")

    return parser


COMMANDS = {
    "add": cmd_add,
    "update": cmd_update,
    "delete": cmd_delete,
    "list": cmd_list,
    "queue": cmd_queue,
    "sync": cmd_sync,
    "status": cmd_status,
    "watch": cmd_watch,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger("spendsync").setLevel(logging.DEBUG)

    try:
        s = SpendSync(online=False) if args.offline else SpendSync()
    except (ValueError, TypeError, OSError) as e:
        logger.error(f"Failed to initialize spendsync: {e}")
        sys.exit(1)

    # Dispatch with error handling
    try:
        code = COMMANDS[args.command](args, s)
    except ValueError as e:
        # ExpenseValidationError is a ValueError
        logger.error(f"Input validation error: {e}")
        sys.exit(1)
    except RemoteStoreError as e:
        logger.error(f"Backend request failed: {e}")
        sys.exit(1)
    finally:
        s.close()

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
