"""Postgres repository for users."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ....core.exceptions import NotFoundError
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.user import ResilocServiceRole, User, UserRole
from ..utils.queries import (
    ROLES_ADD,
    ROLES_CLEAR,
    ROLES_REMOVE_ONE,
    ROLES_SET,
    USER_DELETE,
    USER_GET_BY_ID,
    USER_GET_BY_USERNAME,
    USER_ID_BY_USERNAME,
    USER_INSERT,
    USER_LIST_ALL,
    USER_UPDATE,
)

logger = logging.getLogger(__name__)


class UserDatabaseRepository:
    """Database repository for users and their community roles."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    @handle_database_errors("create user")
    async def create(self, user: User) -> User:
        async with self._db.transaction() as tx:
            await tx.execute_command(
                self._q(USER_INSERT),
                user.id, user.username, user.email, user.password_hash, user.is_admin,
                user.resiloc_service_role.value if user.resiloc_service_role else None,
                user.first_name, user.last_name, user.phone, user.is_active,
                user.date_created, user.date_modified,
            )
            for community_id, roles in user.user_roles.items():
                await tx.execute_command(
                    self._q(ROLES_SET), user.id, community_id, [role.value for role in roles]
                )
        logger.info(f"Created user {user.username}")
        return user

    @handle_database_errors("get user")
    async def get_by_id(self, user_id: str) -> Optional[User]:
        row = await self._db.execute_fetchrow(self._q(USER_GET_BY_ID), user_id)
        return self._map_row_to_user(row) if row else None

    @handle_database_errors("get user")
    async def get_by_username(self, username: str) -> Optional[User]:
        row = await self._db.execute_fetchrow(self._q(USER_GET_BY_USERNAME), username)
        return self._map_row_to_user(row) if row else None

    @handle_database_errors("list users")
    async def find_all(self) -> List[User]:
        rows = await self._db.execute_query(self._q(USER_LIST_ALL))
        return [self._map_row_to_user(row) for row in rows]

    @handle_database_errors("update user")
    async def update(self, user: User) -> User:
        status = await self._db.execute_command(
            self._q(USER_UPDATE),
            user.username, user.email, user.first_name, user.last_name,
            user.phone, user.is_active, user.date_modified, user.password_hash,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"Username {user.username} does not exist")
        return user

    @handle_database_errors("delete user")
    async def delete(self, username: str) -> bool:
        status = await self._db.execute_command(self._q(USER_DELETE), username)
        return affected_rows(status) > 0

    async def _user_id(self, username: str) -> str:
        user_id = await self._db.execute_fetchval(self._q(USER_ID_BY_USERNAME), username)
        if user_id is None:
            raise NotFoundError(f"Username {username} does not exist")
        return user_id

    @handle_database_errors("set user roles")
    async def set_roles(self, username: str, community_id: str, roles: Iterable[UserRole]) -> None:
        user_id = await self._user_id(username)
        await self._db.execute_command(
            self._q(ROLES_SET), user_id, community_id, [UserRole(role).value for role in roles]
        )

    @handle_database_errors("add user roles")
    async def add_roles(self, username: str, community_id: str, roles: Iterable[UserRole]) -> None:
        user_id = await self._user_id(username)
        await self._db.execute_command(
            self._q(ROLES_ADD), user_id, community_id, [UserRole(role).value for role in roles]
        )

    @handle_database_errors("remove user role")
    async def remove_role(self, username: str, community_id: str, role: UserRole) -> None:
        user_id = await self._user_id(username)
        await self._db.execute_command(self._q(ROLES_REMOVE_ONE), user_id, community_id, UserRole(role).value)

    @handle_database_errors("clear user roles")
    async def clear_roles(self, username: str, community_id: str) -> None:
        user_id = await self._user_id(username)
        await self._db.execute_command(self._q(ROLES_CLEAR), user_id, community_id)

    def _map_row_to_user(self, row: Dict[str, Any]) -> User:
        """Map database row to User entity."""
        service_role = row.get("resiloc_service_role")
        return User(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            is_admin=row.get("is_admin", False),
            resiloc_service_role=ResilocServiceRole(service_role) if service_role else None,
            user_roles={
                community_id: {UserRole(role) for role in roles}
                for community_id, roles in (row.get("user_roles") or {}).items()
            },
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            phone=row.get("phone") or "",
            is_active=row.get("is_active", False),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
