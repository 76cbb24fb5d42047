"""Community service.

Communities own the per-tenant copies of catalog templates (static proxies
and scenario instances), their snapshots and the graph of parent, peer and
child links. Removing a community walks everything it owns before the row
itself goes away.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from ....utils.datetime import utc_now
from ....utils.enums import parse_enum, parse_optional_enum
from ...catalog.entities.enums import StaticProxyType, Visibility
from ...catalog.utils.validation import ensure_no_duplicates
from ...identity.services.identity_service import IdentityService
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse
from ...policy.services.policy import VisibilityPolicy
from ...resiloc_proxies.entities.protocols import ResilocProxyRepository
from ...resiloc_scenarios.entities.protocols import ResilocScenarioRepository
from ...users.entities.user import User, normalize_text
from ..entities.community import (
    Community,
    CommunityMetadata,
    CommunityRelation,
    CommunitySetField,
    EdgeOperation,
    normalize_community_name,
)
from ..entities.protocols import CommunityRepository

if TYPE_CHECKING:
    from ...scenarios.services.scenario_service import ScenariosService
    from ...snapshots.services.snapshot_service import SnapshotsService
    from ...static_proxies.services.static_proxy_service import StaticProxiesService
    from ...users.services.user_service import UserService

logger = logging.getLogger(__name__)

RELATION_LABELS = {
    CommunityRelation.PARENTS: "parents' community ids",
    CommunityRelation.PEERS: "peers' community ids",
    CommunityRelation.CHILDREN: "children's community ids",
}


def _member_view(user: User, community_id: str) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "phone": user.phone,
        "email": user.email,
        "userRoles": sorted(role.value for role in user.roles_in(community_id)),
    }


class CommunityService:
    """Service for communities, their members, selections and graph links."""

    def __init__(
        self,
        repository: CommunityRepository,
        resiloc_proxy_repository: ResilocProxyRepository,
        resiloc_scenario_repository: ResilocScenarioRepository,
        users: "UserService",
        static_proxies: "StaticProxiesService",
        scenarios: "ScenariosService",
        snapshots: "SnapshotsService",
        identity: IdentityService,
    ):
        self._repository = repository
        self._resiloc_proxies = resiloc_proxy_repository
        self._resiloc_scenarios = resiloc_scenario_repository
        self._users = users
        self._static_proxies = static_proxies
        self._scenarios = scenarios
        self._snapshots = snapshots
        self._identity = identity

    async def _require(self, community_id: str) -> Community:
        community = await self._repository.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community {community_id} does not exist")
        return community

    async def _ensure_member_access(self, community_id: str, username: str, flid: Optional[str]) -> bool:
        """Admins and callers whose flid names the community pass; returns is_admin."""
        is_admin = await self._identity.is_admin(username)
        if not (is_admin or self._identity.is_community_id_matching_with_flid(community_id, flid)):
            raise ForbiddenError()
        return is_admin

    async def _require_follow_target(self, username: str) -> User:
        user = await self._identity.require_user(normalize_text(username))
        if user.is_admin:
            raise ForbiddenError("Admin does not belong to any specific communities")
        if user.is_resiloc_service:
            raise ForbiddenError("Resiloc service does not belong to any specific communities")
        return user

    @inventory_error_handler("create community")
    async def create(self, data: Dict[str, Any]) -> Community:
        community = Community(
            name=data.get("name"),
            visibility=parse_optional_enum(Visibility, data.get("visibility"), "visibility") or Visibility.DRAFT,
            metadata=CommunityMetadata.from_dict(data.get("metadata")),
        )
        if not community.name:
            raise BadRequestError("Community name is required")
        created = await self._repository.create(community)
        logger.info(f"Created community {created.id} '{created.name}'")
        return created

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[Community]:
        return OffsetPaginationResponse.from_items(await self._repository.find_all(), pagination)

    @inventory_error_handler("get community")
    async def get_community(self, community_id: str, username: str, flid: Optional[str] = None) -> Dict[str, Any]:
        """Full view for admins and members; citizens only see name and metadata."""
        community_id = self._identity.resolve_community_id(community_id, flid)
        is_admin = await self._ensure_member_access(community_id, username, flid)
        community = await self._require(community_id)
        if not is_admin and await self._identity.is_citizen(username, community_id):
            return community.to_limited_dict()
        return community.to_dict()

    @inventory_error_handler("update community")
    async def update(
        self,
        community_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> Community:
        community_id = self._identity.resolve_community_id(community_id, flid)
        await self._ensure_member_access(community_id, username, flid)
        community = await self._require(community_id)

        if "name" in changes and changes["name"] is not None:
            community.name = normalize_community_name(changes["name"])
            if not community.name:
                raise BadRequestError("Community name is required")
        if changes.get("visibility") is not None:
            visibility = parse_enum(Visibility, changes["visibility"], "visibility")
            if visibility == Visibility.DRAFT and community.users:
                raise BadRequestError("Cannot change the visibility of a community with followed users to draft")
            community.visibility = visibility
        if changes.get("metadata") is not None:
            community.metadata = CommunityMetadata.from_dict(
                {**community.metadata.to_dict(), **changes["metadata"]}
            )

        updated = await self._repository.update(community)
        logger.info(f"Updated community {community_id}")
        return updated

    @inventory_error_handler("get users of community")
    async def get_users_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        community_id = self._identity.resolve_community_id(community_id, flid)
        await self._ensure_member_access(community_id, username, flid)
        community = await self._require(community_id)
        users = await self._users.get_users_by_ids(community.users)
        items = [
            _member_view(user, community.id)
            for user in sorted(users, key=lambda user: user.username)
        ]
        return OffsetPaginationResponse.from_items(items, pagination)

    async def _ensure_can_list_follows(self, username: str, caller: str) -> User:
        user = await self._identity.require_user(normalize_text(username))
        if user.is_admin:
            raise ForbiddenError("Admin does not belong to any specific communities")
        if not await self._identity.is_self_or_admin(username, caller):
            raise ForbiddenError()
        return user

    @inventory_error_handler("get communities to follow")
    async def get_communities_to_follow(
        self,
        username: str,
        caller: str,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        user = await self._ensure_can_list_follows(username, caller)
        communities = await self._repository.find_followable_by(user.id)
        items = [{"id": community.id, "name": community.name} for community in communities]
        return OffsetPaginationResponse.from_items(items, pagination)

    @inventory_error_handler("get followed communities")
    async def get_followed_communities(
        self,
        username: str,
        caller: str,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        user = await self._ensure_can_list_follows(username, caller)
        communities = await self._repository.find_followed_by(user.id)
        items = [
            {
                "id": community.id,
                "name": community.name,
                "userRoles": sorted(role.value for role in user.roles_in(community.id)),
            }
            for community in communities
        ]
        return OffsetPaginationResponse.from_items(items, pagination)

    async def _ensure_can_manage_membership(self, community_id: str, username: str, caller: str) -> None:
        if await self._identity.is_admin(caller):
            return
        if await self._identity.is_local_manager(caller, community_id):
            return
        if normalize_text(username) == normalize_text(caller):
            return
        raise ForbiddenError()

    @inventory_error_handler("follow community")
    async def assign_user_for_community(self, community_id: str, username: str, caller: str) -> Community:
        """Make ``username`` follow the community as a citizen."""
        user = await self._require_follow_target(username)
        community = await self._repository.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community {community_id} does not exist")
        await self._ensure_can_manage_membership(community.id, user.username, caller)

        if community.visibility == Visibility.DRAFT:
            raise BadRequestError("Cannot follow a draft community")
        if user.id in community.users:
            raise ForbiddenError(f"User {user.username} followed community {community.id}")

        await self._users.set_default_user_role_as_citizen(user.username, community.id)
        await self._repository.add_to_set(community.id, CommunitySetField.USERS, user.id)
        community.users.append(user.id)
        logger.info(f"User {user.username} follows community {community.id}")
        return community

    @inventory_error_handler("unfollow community")
    async def remove_user_of_community(self, community_id: str, username: str, caller: str) -> Community:
        user = await self._require_follow_target(username)
        community = await self._repository.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community {community_id} does not exist")
        await self._ensure_can_manage_membership(community.id, user.username, caller)

        if user.id not in community.users:
            raise ForbiddenError(f"User {user.username} did not follow community {community.id}")

        await self._users.remove_user_roles_from_community(user.username, community.id)
        await self._repository.pull_from_set(community.id, CommunitySetField.USERS, user.id)
        community.users.remove(user.id)
        logger.info(f"User {user.username} unfollowed community {community.id}")
        return community

    @inventory_error_handler("select static proxies for community")
    async def select_static_proxies_for_community(
        self,
        community_id: str,
        resiloc_proxy_ids: List[str],
        username: str,
        flid: Optional[str] = None,
    ) -> Community:
        """Replace the community's proxy selection.

        Newly selected templates get a draft instance; deselected ones lose
        theirs. Instances of templates kept in the selection are untouched.
        """
        community_id = self._identity.resolve_community_id(community_id, flid)
        await self._ensure_member_access(community_id, username, flid)
        community = await self._require(community_id)

        ensure_no_duplicates(resiloc_proxy_ids, "resiloc proxy ids")
        for resiloc_proxy_id in resiloc_proxy_ids:
            resiloc_proxy = await self._resiloc_proxies.get_by_id(resiloc_proxy_id)
            if resiloc_proxy is None:
                raise NotFoundError(f"Resiloc proxy id {resiloc_proxy_id} does not exist")
            VisibilityPolicy.ensure_assignable(
                "resiloc proxy", resiloc_proxy.id, resiloc_proxy.status, resiloc_proxy.visibility
            )

        desired = set(resiloc_proxy_ids)
        removed = [rp_id for rp_id in community.static_proxies if rp_id not in desired]
        added = [rp_id for rp_id in resiloc_proxy_ids if rp_id not in community.static_proxies]

        for resiloc_proxy_id in removed:
            static_proxy_id = community.static_proxies.pop(resiloc_proxy_id)
            await self._static_proxies.remove(static_proxy_id)
            await self._repository.unset_static_proxy(community.id, resiloc_proxy_id)
        for resiloc_proxy_id in added:
            static_proxy = await self._static_proxies.create(
                resiloc_proxy_id, StaticProxyType.PROXY_OF_COMMUNITY, Visibility.DRAFT
            )
            await self._repository.set_static_proxy(community.id, resiloc_proxy_id, static_proxy.id)
            community.static_proxies[resiloc_proxy_id] = static_proxy.id

        logger.info(
            f"Community {community.id} proxy selection: {len(added)} added, {len(removed)} removed"
        )
        return community

    @inventory_error_handler("select scenarios for community")
    async def select_scenarios_for_community(
        self,
        community_id: str,
        resiloc_scenario_ids: List[str],
        username: str,
        flid: Optional[str] = None,
    ) -> Community:
        community_id = self._identity.resolve_community_id(community_id, flid)
        await self._ensure_member_access(community_id, username, flid)
        community = await self._require(community_id)

        ensure_no_duplicates(resiloc_scenario_ids, "resiloc scenario ids")
        for resiloc_scenario_id in resiloc_scenario_ids:
            resiloc_scenario = await self._resiloc_scenarios.get_by_id(resiloc_scenario_id)
            if resiloc_scenario is None:
                raise NotFoundError(f"Resiloc scenario id {resiloc_scenario_id} does not exist")
            VisibilityPolicy.ensure_assignable(
                "resiloc scenario", resiloc_scenario.id, resiloc_scenario.status, resiloc_scenario.visibility
            )

        desired = set(resiloc_scenario_ids)
        removed = [rs_id for rs_id in community.scenarios if rs_id not in desired]
        added = [rs_id for rs_id in resiloc_scenario_ids if rs_id not in community.scenarios]

        for resiloc_scenario_id in removed:
            scenario_id = community.scenarios.pop(resiloc_scenario_id)
            await self._scenarios.remove(scenario_id)
            await self._repository.unset_scenario(community.id, resiloc_scenario_id)
        for resiloc_scenario_id in added:
            scenario = await self._scenarios.create(resiloc_scenario_id)
            await self._repository.set_scenario(community.id, resiloc_scenario_id, scenario.id)
            community.scenarios[resiloc_scenario_id] = scenario.id

        logger.info(
            f"Community {community.id} scenario selection: {len(added)} added, {len(removed)} removed"
        )
        return community

    async def _check_pointers(self, community: Community, pointers: Dict[CommunityRelation, List[str]]) -> None:
        for relation, ids in pointers.items():
            ensure_no_duplicates(ids, RELATION_LABELS[relation])
        for relation, ids in pointers.items():
            if community.id in ids:
                raise BadRequestError(f"Community {community.id} cannot point to itself")
            found = {other.id for other in await self._repository.get_by_ids(ids)} if ids else set()
            missing = [other_id for other_id in ids if other_id not in found]
            if missing:
                raise NotFoundError(f"Community id {missing[0]} does not exist")

    @staticmethod
    def _pointers(
        parents: Optional[Iterable[str]],
        peers: Optional[Iterable[str]],
        children: Optional[Iterable[str]],
    ) -> Dict[CommunityRelation, List[str]]:
        return {
            CommunityRelation.PARENTS: list(parents or []),
            CommunityRelation.PEERS: list(peers or []),
            CommunityRelation.CHILDREN: list(children or []),
        }

    async def update_graph_edge(
        self, community_id: str, relation: CommunityRelation, other_id: str, op: EdgeOperation
    ) -> None:
        """Apply one edge change to both endpoints."""
        if op == EdgeOperation.LINK:
            await self._repository.link(community_id, relation, other_id)
        else:
            await self._repository.unlink(community_id, relation, other_id)

    @inventory_error_handler("assign community pointers")
    async def assign_pointers(
        self,
        community_id: str,
        parents: Optional[Iterable[str]] = None,
        peers: Optional[Iterable[str]] = None,
        children: Optional[Iterable[str]] = None,
    ) -> Community:
        """Add graph edges; both endpoints record every edge."""
        community = await self._require(community_id)
        pointers = self._pointers(parents, peers, children)
        await self._check_pointers(community, pointers)

        linked = 0
        for relation, ids in pointers.items():
            for other_id in ids:
                if other_id in community.relation(relation):
                    continue
                await self.update_graph_edge(community.id, relation, other_id, EdgeOperation.LINK)
                community.relation(relation).append(other_id)
                linked += 1
        logger.info(f"Linked {linked} communities to community {community.id}")
        return community

    @inventory_error_handler("remove community pointers")
    async def remove_pointers(
        self,
        community_id: str,
        parents: Optional[Iterable[str]] = None,
        peers: Optional[Iterable[str]] = None,
        children: Optional[Iterable[str]] = None,
    ) -> Community:
        community = await self._require(community_id)
        pointers = self._pointers(parents, peers, children)
        await self._check_pointers(community, pointers)

        unlinked = 0
        for relation, ids in pointers.items():
            for other_id in ids:
                if other_id not in community.relation(relation):
                    continue
                await self.update_graph_edge(community.id, relation, other_id, EdgeOperation.UNLINK)
                community.relation(relation).remove(other_id)
                unlinked += 1
        logger.info(f"Unlinked {unlinked} communities from community {community.id}")
        return community

    @inventory_error_handler("remove community")
    async def remove(self, community_id: str) -> bool:
        community = await self._require(community_id)
        if community.users:
            raise BadRequestError("Cannot remove a community that had user")
        await self._repository.mark_deletion_started(community.id, utc_now())
        return await self._delete_owned(community)

    @inventory_error_handler("resume community deletion")
    async def resume_deletion(self, community_id: str) -> bool:
        """Finish a removal that stopped half way; every step is safe to repeat."""
        community = await self._require(community_id)
        if not community.is_being_deleted:
            raise BadRequestError(f"Community {community_id} is not being removed")
        return await self._delete_owned(community)

    async def resume_pending_deletions(self) -> int:
        pending = await self._repository.find_pending_deletions()
        for community in pending:
            await self._delete_owned(community)
        if pending:
            logger.info(f"Resumed deletion of {len(pending)} communities")
        return len(pending)

    async def _delete_owned(self, community: Community) -> bool:
        for relation in CommunityRelation:
            for other_id in list(community.relation(relation)):
                await self.update_graph_edge(community.id, relation, other_id, EdgeOperation.UNLINK)

        for member in await self._users.get_users_by_ids(community.users):
            await self._users.remove_user_roles_from_community(member.username, community.id)

        for resiloc_proxy_id, static_proxy_id in list(community.static_proxies.items()):
            await self._static_proxies.remove_many([static_proxy_id])
            await self._repository.unset_static_proxy(community.id, resiloc_proxy_id)

        for resiloc_scenario_id, scenario_id in list(community.scenarios.items()):
            if await self._scenarios.get_by_ids([scenario_id]):
                await self._scenarios.remove(scenario_id)
            await self._repository.unset_scenario(community.id, resiloc_scenario_id)

        for snapshot in await self._snapshots.get_by_ids(community.snapshots):
            await self._snapshots.purge(snapshot, community.id)

        deleted = await self._repository.delete(community.id)
        logger.info(f"Removed community {community.id} '{community.name}'")
        return deleted

    async def get_by_ids(self, community_ids: Iterable[str]) -> List[Community]:
        return await self._repository.get_by_ids(list(community_ids))
