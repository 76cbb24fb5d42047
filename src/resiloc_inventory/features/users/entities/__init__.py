"""User entities."""

from .protocols import PasswordHasher, UserRepository
from .user import ResilocServiceRole, User, UserRole, normalize_text

__all__ = [
    "PasswordHasher",
    "UserRepository",
    "ResilocServiceRole",
    "User",
    "UserRole",
    "normalize_text",
]
