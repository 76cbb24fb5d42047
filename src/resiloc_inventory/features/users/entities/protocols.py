"""Protocol interfaces for user persistence and password hashing."""

from abc import abstractmethod
from typing import Iterable, List, Optional, Protocol, runtime_checkable

from .user import User, UserRole


@runtime_checkable
class UserRepository(Protocol):
    """Protocol for user data persistence operations."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user; raises UniqueConstraintError on duplicates."""
        ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_all(self) -> List[User]:
        ...

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist profile fields (not roles)."""
        ...

    @abstractmethod
    async def delete(self, username: str) -> bool:
        ...

    @abstractmethod
    async def set_roles(self, username: str, community_id: str, roles: Iterable[UserRole]) -> None:
        """Replace the roles a user holds in a community."""
        ...

    @abstractmethod
    async def add_roles(self, username: str, community_id: str, roles: Iterable[UserRole]) -> None:
        """Add roles to a community entry, ignoring ones already held."""
        ...

    @abstractmethod
    async def remove_role(self, username: str, community_id: str, role: UserRole) -> None:
        ...

    @abstractmethod
    async def clear_roles(self, username: str, community_id: str) -> None:
        """Drop the community entry entirely."""
        ...


@runtime_checkable
class PasswordHasher(Protocol):
    """Collaborator that turns a plain password into an opaque hash."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, hashed: str) -> bool:
        ...
