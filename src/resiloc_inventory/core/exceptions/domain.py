"""Domain exceptions for the inventory backend.

The taxonomy mirrors what callers can act upon: a referenced record is
absent, the caller is not permitted, the request breaks a structural rule,
or a unique value is already taken.
"""

from typing import List, Optional

from .base import ResilocError


class NotFoundError(ResilocError):
    """Raised when a referenced record does not exist."""
    pass


class ForbiddenError(ResilocError):
    """Raised when an authenticated caller is not allowed to act on a record."""

    def __init__(self, message: str = "Forbidden resource", **kwargs):
        super().__init__(message, **kwargs)


class AuthenticationError(ResilocError):
    """Raised when no valid principal can be derived from the request."""
    pass


class BadRequestError(ResilocError):
    """Raised when a request violates a structural invariant."""
    pass


class InvalidArgumentError(BadRequestError):
    """Raised when an argument cannot be decoded or parsed."""
    pass


class ConflictError(ResilocError):
    """Raised when a write conflicts with existing state."""
    pass


class UniqueConstraintError(ConflictError):
    """Raised when a unique value is already taken at the store layer."""

    def __init__(self, message: str, fields: Optional[List[str]] = None, **kwargs):
        super().__init__(message, details={"fields": fields or []}, **kwargs)
        self.fields = fields or []


class ConfigurationError(ResilocError):
    """Raised when there's a configuration issue."""
    pass


class DatabaseError(ResilocError):
    """Raised when the persistence layer fails unexpectedly."""
    pass
