"""Sync commands for the spendsync CLI: sync, status, watch."""

import json
import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spendsync import SpendSync

logger = logging.getLogger(__name__)


def cmd_sync(args, s: "SpendSync"):
    """Push pending changes now."""
    if not s.is_online():
        print("✗ Offline - changes stay queued")
        return 1

    pending = len(s.pending_actions())
    if pending == 0:
        print("Nothing to sync.")
        return 0

    result = s.trigger_sync()
    if args.json:
        print(
            json.dumps(
                {
                    "pushed": result.pushed,
                    "total": result.total,
                    "success": result.success,
                    "errors": result.errors,
                },
                indent=2,
            )
        )
    elif result.success:
        print(f"✓ Synced {result.pushed} change(s)")
    elif not result.attempted:
        print("Sync already in progress.")
    else:
        print(f"✗ Sync stopped after {result.pushed}/{result.total} change(s); all kept for retry")
        for error in result.errors:
            print(f"  {error}")
    return 0 if result.success or not result.attempted else 1


def cmd_status(args, s: "SpendSync"):
    """Show connectivity, sync status and pending count."""
    summary = s.sync_summary()
    if args.json:
        print(json.dumps(summary, indent=2))
        return

    print(f"Connectivity: {'online' if summary['online'] else 'offline'}")
    print(f"Sync status:  {summary['status']}")
    print(f"Pending:      {summary['pending']}")


def cmd_watch(args, s: "SpendSync"):
    """Poll connectivity and sync on every transition to online."""
    unsubscribe = s.connectivity.subscribe(
        lambda online: print(f"Connectivity: {'online' if online else 'offline'}")
    )
    print(f"Watching connectivity every {args.interval}s (Ctrl+C to stop)")
    checks = 0
    try:
        while args.count is None or checks < args.count:
            s.check_connectivity()
            checks += 1
            if args.count is not None and checks >= args.count:
                break
            time.sleep(args.interval)
    except KeyboardInterrupt:
        print("\nStopped.")
    finally:
        unsubscribe()
