"""Datetime helpers."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
