"""Utility functions for the application."""

from datetime import datetime, timezone


def now_ms():
    """Return the current time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)
