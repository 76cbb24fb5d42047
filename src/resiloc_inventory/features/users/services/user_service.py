"""User service.

Accounts, profile edits and per-community role management. Roles only exist
for communities the user follows; following and unfollowing live in the
community service, which calls ``set_default_user_role_as_citizen`` and
``remove_user_roles_from_community`` here.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from ....utils.datetime import utc_now
from ....utils.enums import parse_enum
from ...catalog.utils.validation import has_duplicates
from ...communities.entities.community import CommunitySetField
from ...communities.entities.protocols import CommunityRepository
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse
from ..entities.protocols import PasswordHasher, UserRepository
from ..entities.user import ResilocServiceRole, User, UserRole, capitalize_words, normalize_text

if TYPE_CHECKING:
    from ...identity.services.identity_service import IdentityService

logger = logging.getLogger(__name__)

UPDATABLE_PROFILE_FIELDS = ("email", "first_name", "last_name", "phone")


class UserService:
    """Service for user accounts and the roles they hold in communities."""

    def __init__(
        self,
        repository: UserRepository,
        community_repository: CommunityRepository,
        identity: "IdentityService",
        hasher: PasswordHasher,
    ):
        self._repository = repository
        self._communities = community_repository
        self._identity = identity
        self._hasher = hasher

    @inventory_error_handler("create user")
    async def create(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        phone: str = "",
        is_admin: bool = False,
        resiloc_service_role: Optional[ResilocServiceRole] = None,
        is_active: bool = False,
    ) -> User:
        if not normalize_text(username):
            raise BadRequestError("Username must not be empty")
        user = User(
            username=username,
            email=email,
            password_hash=self._hasher.hash(password),
            is_admin=is_admin,
            resiloc_service_role=(
                parse_enum(ResilocServiceRole, resiloc_service_role, "RESILOC service role")
                if resiloc_service_role
                else None
            ),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            is_active=is_active,
        )
        created = await self._repository.create(user)
        logger.info(f"Created user {created.username}")
        return created

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[User]:
        users = sorted(await self._repository.find_all(), key=lambda user: user.username)
        return OffsetPaginationResponse.from_items(users, pagination)

    async def _ensure_self_or_admin(self, username: str, caller: str) -> None:
        if normalize_text(username) == normalize_text(caller):
            return
        if await self._identity.is_admin(caller):
            return
        raise ForbiddenError()

    @inventory_error_handler("get user info")
    async def get_user_info(self, username: str, caller: str) -> User:
        await self._ensure_self_or_admin(username, caller)
        user = await self._repository.get_by_username(normalize_text(username))
        if user is None:
            raise NotFoundError(f"Username {username} does not exist")
        return user

    @inventory_error_handler("update user")
    async def update(self, username: str, changes: Dict[str, Any], caller: str) -> User:
        """Update profile fields; account flags and roles are not editable here."""
        await self._ensure_self_or_admin(username, caller)
        user = await self._repository.get_by_username(normalize_text(username))
        if user is None:
            raise NotFoundError(f"Username {username} does not exist")

        for key in UPDATABLE_PROFILE_FIELDS:
            if changes.get(key) is None:
                continue
            value = changes[key]
            if key == "email":
                value = normalize_text(value)
            elif key in ("first_name", "last_name"):
                value = capitalize_words(value)
            setattr(user, key, value)
        user.date_modified = utc_now()

        updated = await self._repository.update(user)
        logger.info(f"Updated profile of user {updated.username}")
        return updated

    @inventory_error_handler("change password")
    async def change_password(self, username: str, old_password: str, new_password: str, caller: str) -> User:
        await self._ensure_self_or_admin(username, caller)
        user = await self._repository.get_by_username(normalize_text(username))
        if user is None or not self._hasher.verify(old_password, user.password_hash):
            raise BadRequestError("The old password is incorrect")
        user.password_hash = self._hasher.hash(new_password)
        user.date_modified = utc_now()
        return await self._repository.update(user)

    async def _ensure_role_target(self, user: User, action: str) -> None:
        if user.is_admin:
            raise ForbiddenError(f"Unable to {action} user roles for admin accounts")
        if user.is_resiloc_service:
            raise ForbiddenError(f"Unable to {action} user roles for resiloc service accounts")

    async def _ensure_community_manager(self, community_id: str, caller: str, flid: Optional[str]) -> None:
        if await self._identity.is_admin(caller):
            return
        if self._identity.is_community_id_matching_with_flid(community_id, flid):
            return
        raise ForbiddenError()

    async def _ensure_follows(self, user: User, community_id: str, message: str) -> None:
        community = await self._communities.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community id {community_id} does not exist")
        if user.id not in community.users:
            raise BadRequestError(message)

    @inventory_error_handler("assign user role")
    async def assign_user_role(
        self,
        username: str,
        community_id: str,
        roles: List[Union[UserRole, str]],
        caller: str,
        flid: Optional[str] = None,
    ) -> User:
        """Add roles to a user in a community the user already follows."""
        user = await self._identity.require_user(normalize_text(username))
        await self._ensure_role_target(user, "assign")
        if has_duplicates(roles):
            raise BadRequestError("Array of user roles contains duplicate values")

        await self._ensure_community_manager(community_id, caller, flid)
        if user.username == normalize_text(caller):
            raise BadRequestError("Unable to self-assign roles")
        await self._ensure_follows(user, community_id, f"User {user.username} does not belong to this community")

        requested = [parse_enum(UserRole, role, "role") for role in roles]
        if UserRole.ADMIN in requested:
            raise ForbiddenError("Unable to assign roles as admin")

        await self._repository.add_roles(user.username, community_id, requested)
        logger.info(
            f"Assigned roles {[role.value for role in requested]} to {user.username} in community {community_id}"
        )
        return await self._identity.require_user(user.username)

    @inventory_error_handler("remove user role")
    async def remove_user_role(
        self,
        username: str,
        community_id: str,
        roles: List[Union[UserRole, str]],
        caller: str,
        flid: Optional[str] = None,
    ) -> User:
        """Remove roles; citizen and admin can never be removed.

        Every role is checked before anything is written.
        """
        user = await self._identity.require_user(normalize_text(username))
        await self._ensure_role_target(user, "remove")
        if has_duplicates(roles):
            raise BadRequestError("Array of user roles contains duplicate values")

        await self._ensure_community_manager(community_id, caller, flid)
        await self._ensure_follows(user, community_id, "User does not belong to this community")

        requested = [parse_enum(UserRole, role, "role") for role in roles]
        caller_is_admin = await self._identity.is_admin(caller)
        for role in requested:
            if role == UserRole.CITIZEN:
                raise BadRequestError("Cannot remove citizen role")
            if role == UserRole.ADMIN:
                raise BadRequestError("Cannot remove admin role")
            if role == UserRole.COMMUNITY_ADMIN and not caller_is_admin:
                raise BadRequestError("Only admin can remove community admin role")

        for role in requested:
            await self._repository.remove_role(user.username, community_id, role)
        logger.info(
            f"Removed roles {[role.value for role in requested]} from {user.username} in community {community_id}"
        )
        return await self._identity.require_user(user.username)

    @inventory_error_handler("remove user")
    async def remove(self, username: str) -> bool:
        user = await self._identity.require_user(normalize_text(username))
        if user.is_admin:
            raise BadRequestError("Cannot remove admin account")
        if user.is_resiloc_service:
            raise BadRequestError("Cannot remove resiloc service account")

        pulled = await self._communities.pull_from_all(CommunitySetField.USERS, user.id)
        deleted = await self._repository.delete(user.username)
        logger.info(f"Removed user {user.username} (unfollowed {pulled} communities)")
        return deleted

    async def get_user_roles(self, username: str) -> Union[List[UserRole], List[Dict[str, Any]]]:
        """Roles of a user grouped by community, or ``[admin]`` for admins."""
        user = await self._identity.require_user(normalize_text(username))
        if user.is_admin:
            return [UserRole.ADMIN]
        communities = await self._communities.get_by_ids(list(user.user_roles))
        return [
            {
                "id": community.id,
                "name": community.name,
                "userRoles": sorted(role.value for role in user.roles_in(community.id)),
            }
            for community in sorted(communities, key=lambda community: community.name)
        ]

    async def set_default_user_role_as_citizen(self, username: str, community_id: str) -> None:
        await self._repository.set_roles(normalize_text(username), community_id, [UserRole.CITIZEN])

    async def remove_user_roles_from_community(self, username: str, community_id: str) -> None:
        await self._repository.clear_roles(normalize_text(username), community_id)

    async def get_users_by_ids(self, user_ids: Iterable[str]) -> List[User]:
        users = [await self._repository.get_by_id(user_id) for user_id in user_ids]
        return [user for user in users if user is not None]
