"""Standardized error handling for service operations.

Domain errors are expected outcomes of caller input and are logged at info
level; anything else is logged at the configured level. Both are re-raised
unless the caller opts out.
"""

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .exceptions import ResilocError

logger = logging.getLogger(__name__)

_CONTEXT_KEYS = (
    "id",
    "community_id",
    "snapshot_id",
    "resiloc_proxy_id",
    "resiloc_indicator_id",
    "resiloc_scenario_id",
    "username",
)


def inventory_error_handler(
    operation_name: str,
    log_level: int = logging.ERROR,
    reraise: bool = True,
    default_return: Any = None,
    context_fields: Optional[Dict[str, str]] = None
):
    """Decorator for standardized service error handling.

    Args:
        operation_name: Name of the operation for logging
        log_level: Logging level for unexpected errors (default: ERROR)
        reraise: Whether to re-raise the exception (default: True)
        default_return: Default return value if not re-raising
        context_fields: Additional context fields for logging

    Usage:
        @inventory_error_handler("submit snapshot")
        async def submit_snapshot(self, id, username, flid=None):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            operation_context = {
                "operation": operation_name,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "function": func.__name__,
            }

            if context_fields:
                operation_context.update(context_fields)

            for key in _CONTEXT_KEYS:
                if key in kwargs:
                    operation_context[key] = str(kwargs[key])

            try:
                return await func(*args, **kwargs)

            except ResilocError as e:
                context_str = ", ".join(f"{k}={v}" for k, v in operation_context.items())
                logger.info(f"Domain exception in {operation_name}: {e.message} | Context: {context_str}")

                if reraise:
                    raise
                return default_return

            except Exception as e:
                context_str = ", ".join(f"{k}={v}" for k, v in operation_context.items())
                logger.log(log_level, f"Failed to {operation_name}: {e} | Context: {context_str}")

                if reraise:
                    raise
                return default_return

        return wrapper
    return decorator
