"""Command-line interface for spendsync."""
