"""HTTP status code mapping for exceptions."""

from typing import Dict, Optional, Type

from .base import ResilocError
from .domain import (
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    UniqueConstraintError,
)


HTTP_STATUS_MAP = {
    # 400 Bad Request
    BadRequestError: 400,
    InvalidArgumentError: 400,

    # 401 Unauthorized
    AuthenticationError: 401,

    # 403 Forbidden
    ForbiddenError: 403,

    # 404 Not Found
    NotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,
    UniqueConstraintError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,
    DatabaseError: 500,

    # Default for ResilocError
    ResilocError: 500,
}


class HttpStatusMapper:
    """Exception to HTTP status mapper with per-type caching.

    Subclasses without an explicit entry inherit the status of their
    closest mapped ancestor.
    """

    def __init__(self, overrides: Optional[Dict[Type[Exception], int]] = None):
        self._overrides = overrides or {}
        self._cache: Dict[Type[Exception], int] = {}

    def get_status_code(self, exception: Exception) -> int:
        exception_type = type(exception)

        if exception_type in self._cache:
            return self._cache[exception_type]

        status_code = 500
        for klass in exception_type.__mro__:
            if klass in self._overrides:
                status_code = self._overrides[klass]
                break
            if klass in HTTP_STATUS_MAP:
                status_code = HTTP_STATUS_MAP[klass]
                break

        self._cache[exception_type] = status_code
        return status_code

    def clear_cache(self) -> None:
        """Clear the status code cache."""
        self._cache.clear()


# Global mapper instance
_global_mapper: Optional[HttpStatusMapper] = None


def get_mapper() -> HttpStatusMapper:
    """Get or create the global HTTP status mapper."""
    global _global_mapper
    if _global_mapper is None:
        _global_mapper = HttpStatusMapper()
    return _global_mapper


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception using the global mapper."""
    return get_mapper().get_status_code(exception)
