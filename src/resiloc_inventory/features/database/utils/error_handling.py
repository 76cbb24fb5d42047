"""Translation of asyncpg failures into domain exceptions."""

import functools
import logging
import re
from typing import Any, Callable, List

import asyncpg

from ....core.exceptions import DatabaseError, UniqueConstraintError

logger = logging.getLogger(__name__)

# asyncpg detail: 'Key (name)=(Flood) already exists.'
_KEY_DETAIL = re.compile(r"Key \(([^)]+)\)=")


def unique_violation_fields(error: asyncpg.UniqueViolationError) -> List[str]:
    """Extract the offending column names from a unique violation."""
    detail = getattr(error, "detail", None) or ""
    match = _KEY_DETAIL.search(detail)
    if not match:
        return []
    return [column.strip() for column in match.group(1).split(",")]


def handle_database_errors(operation: str) -> Callable:
    """Decorator mapping asyncpg errors raised by repository methods.

    Unique violations become ``UniqueConstraintError`` carrying the
    duplicated fields; other Postgres errors become ``DatabaseError``.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except asyncpg.UniqueViolationError as e:
                fields = unique_violation_fields(e)
                logger.info(f"Unique violation during {operation}: {fields}")
                raise UniqueConstraintError(
                    f"Duplicated value for {', '.join(fields) or 'unique field'}",
                    fields=fields,
                )
            except asyncpg.PostgresError as e:
                logger.error(f"Database error during {operation}: {e}")
                raise DatabaseError(f"Failed to {operation}: {e}")
        return wrapper
    return decorator
