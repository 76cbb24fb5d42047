"""Exception hierarchy for the inventory backend."""

from .base import ResilocError, create_error_response, get_http_status_code
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
from .http_mapping import HTTP_STATUS_MAP, HttpStatusMapper

__all__ = [
    "ResilocError",
    "create_error_response",
    "get_http_status_code",
    "AuthenticationError",
    "BadRequestError",
    "ConfigurationError",
    "ConflictError",
    "DatabaseError",
    "ForbiddenError",
    "InvalidArgumentError",
    "NotFoundError",
    "UniqueConstraintError",
    "HTTP_STATUS_MAP",
    "HttpStatusMapper",
]
