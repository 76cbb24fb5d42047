"""Helpers for asyncpg command results."""


def affected_rows(status: str) -> int:
    """Row count of a command status such as ``'DELETE 3'``."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0
