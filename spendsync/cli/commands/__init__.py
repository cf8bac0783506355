"""CLI command modules for spendsync.

Each module contains related command handlers used by __main__.py.
"""

from spendsync.cli.commands.expense import cmd_add, cmd_delete, cmd_list, cmd_queue, cmd_update
from spendsync.cli.commands.sync import cmd_status, cmd_sync, cmd_watch

__all__ = [
    "cmd_add",
    "cmd_update",
    "cmd_delete",
    "cmd_list",
    "cmd_queue",
    "cmd_sync",
    "cmd_status",
    "cmd_watch",
]
