"""Utility functions for working with dates and times."""

from datetime import datetime, timezone

__all__ = [
    "get_current_timestamp",
]

def get_current_timestamp() -> datetime:
    """Return the current UTC datetime.

    MongoDB stores BSON dates with millisecond precision, so the value is
    truncated to whole milliseconds. That keeps a task read back from the
    store equal to the one that was written.
    """
    now = datetime.now(tz=timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)
