"""Identity and role resolution.

Turns a caller (``username`` plus optional ``flid`` header) into the facts
the policy layer reasons about: global admin, service account, and the
roles held in a given community.
"""

import logging
import uuid
from typing import List, Optional, Set

from ....core.exceptions import BadRequestError, NotFoundError
from ...users.entities.protocols import UserRepository
from ...users.entities.user import User, UserRole, normalize_text
from ..utils.flid_cipher import FlidCipher

logger = logging.getLogger(__name__)

SELECTED_COMMUNITY = "selected"


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
        return True
    except ValueError:
        return False


class IdentityService:
    """Resolves callers, community headers and per-community roles."""

    def __init__(
        self,
        user_repository: UserRepository,
        cipher: FlidCipher,
        selected_tag: str = SELECTED_COMMUNITY,
    ):
        self._users = user_repository
        self._cipher = cipher
        self._selected_tag = selected_tag

    async def get_user(self, username: str) -> Optional[User]:
        if not username:
            return None
        return await self._users.get_by_username(username)

    async def require_user(self, username: str) -> User:
        user = await self.get_user(username)
        if user is None:
            raise NotFoundError(f"Username {username} does not exist")
        return user

    async def is_admin(self, username: str) -> bool:
        user = await self.get_user(username)
        return bool(user and user.is_admin)

    async def is_resiloc_service(self, username: str) -> bool:
        user = await self.get_user(username)
        return bool(user and user.is_resiloc_service)

    async def get_user_roles_by_community(self, username: str, community_id: str) -> Set[UserRole]:
        user = await self.get_user(username)
        if user is None:
            return set()
        return user.roles_in(community_id)

    async def has_role(self, username: str, community_id: str, role: UserRole) -> bool:
        return role in await self.get_user_roles_by_community(username, community_id)

    async def is_local_manager(self, username: str, community_id: str) -> bool:
        return await self.has_role(username, community_id, UserRole.LOCAL_MANAGER)

    async def is_citizen(self, username: str, community_id: str) -> bool:
        """True when citizen is the only role held in the community."""
        roles = await self.get_user_roles_by_community(username, community_id)
        return roles == {UserRole.CITIZEN}

    def cipher_community_id(self, community_id: str) -> str:
        return self._cipher.cipher(community_id)

    def decipher_community_id(self, flid: str) -> str:
        return self._cipher.decipher(flid)

    def is_community_id_matching_with_flid(self, community_id: str, flid: Optional[str]) -> bool:
        if not flid or not community_id:
            return False
        return self._cipher.decipher(flid) == str(community_id)

    def resolve_community_id(self, community_id: str, flid: Optional[str]) -> str:
        """Replace the ``selected`` path sentinel with the id carried by flid."""
        if community_id != self._selected_tag:
            return community_id
        if not flid:
            raise BadRequestError("flid is required")
        return self._cipher.decipher(flid)

    def require_community_of_flid(self, flid: Optional[str]) -> str:
        if not flid:
            raise BadRequestError("flid is required")
        return self._cipher.decipher(flid)

    @staticmethod
    def get_defined_roles() -> List[UserRole]:
        return list(UserRole)

    async def get_user_roles_by_flid(self, username: str, flid: Optional[str]) -> List[UserRole]:
        if await self.is_admin(username):
            return [UserRole.ADMIN]
        if not flid:
            raise BadRequestError("flid is required")
        community_id = self._cipher.decipher(flid)
        if not _is_uuid(community_id):
            raise BadRequestError("Flid value is not valid")
        roles = await self.get_user_roles_by_community(username, community_id)
        return sorted(roles, key=lambda role: list(UserRole).index(role))

    async def is_self_or_admin(self, username: str, caller: str) -> bool:
        if normalize_text(username) == normalize_text(caller):
            return True
        return await self.is_admin(caller)
