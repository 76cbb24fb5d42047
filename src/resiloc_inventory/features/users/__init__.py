"""Users feature module."""

from .entities import PasswordHasher, ResilocServiceRole, User, UserRepository, UserRole
from .repositories import UserDatabaseRepository
from .services import UserService
from .utils import PwdlibPasswordHasher

__all__ = [
    "PasswordHasher",
    "ResilocServiceRole",
    "User",
    "UserRepository",
    "UserRole",
    "UserDatabaseRepository",
    "UserService",
    "PwdlibPasswordHasher",
]
