"""Shared formatting helpers for CLI commands."""

from spendsync.types import Expense


def format_amount(amount: float) -> str:
    return f"${amount:,.2f}"


def format_expense(expense: Expense, pending: bool = False) -> str:
    """One-line rendering of an expense, with a marker while unsynced."""
    marker = " [pending]" if pending else ""
    line = (
        f"{expense.date}  {format_amount(expense.amount):>12}  "
        f"{expense.category:<12} {expense.title} ({expense.id}){marker}"
    )
    if expense.notes:
        line += f"\n{'':>28}{expense.notes}"
    return line
