"""Static proxy service.

Static proxies are instances of proxy templates. A community holds at most
one instance per template (its configuration); snapshots hold clones of the
community instances with their own values; indicator instances hold one per
template proxy.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from ....utils.enums import parse_enum
from ...catalog.entities.enums import StaticProxyType, Visibility
from ...catalog.entities.metadata import ProxyMetadata
from ...catalog.utils.metadata_rules import MetadataRules
from ...catalog.utils.validation import CatalogValidationRules
from ...communities.entities.protocols import CommunityRepository
from ...identity.services.identity_service import IdentityService
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse
from ...policy.services.policy import VisibilityPolicy
from ...resiloc_proxies.entities.protocols import ResilocProxyRepository
from ...snapshots.entities.protocols import SnapshotRepository
from ..entities.protocols import StaticProxyRepository
from ..entities.static_proxy import StaticProxy

logger = logging.getLogger(__name__)

INSTANCE_FIELDS = ("value", "min_target", "max_target", "visibility")


def _supplied_metadata(raw: Any) -> Optional[ProxyMetadata]:
    if raw is None:
        return None
    return raw if isinstance(raw, ProxyMetadata) else ProxyMetadata.from_dict(raw)


def _visibility_of(static_proxy: StaticProxy) -> Visibility:
    return static_proxy.visibility


class StaticProxiesService:
    """Service for proxy template instances."""

    def __init__(
        self,
        repository: StaticProxyRepository,
        resiloc_proxy_repository: ResilocProxyRepository,
        community_repository: CommunityRepository,
        snapshot_repository: SnapshotRepository,
        identity: IdentityService,
    ):
        self._repository = repository
        self._resiloc_proxies = resiloc_proxy_repository
        self._communities = community_repository
        self._snapshots = snapshot_repository
        self._identity = identity

    async def require(self, static_proxy_id: str) -> StaticProxy:
        static_proxy = await self._repository.get_by_id(static_proxy_id)
        if static_proxy is None:
            raise NotFoundError(f"Static proxy {static_proxy_id} does not exist")
        return static_proxy

    async def community_of(self, static_proxy_id: str) -> Optional[str]:
        """Owning community: the association map first, then the owning snapshot."""
        community_id = await self._communities.find_id_by_static_proxy(static_proxy_id)
        if community_id is None:
            snapshot = await self._snapshots.find_by_static_proxy(static_proxy_id)
            if snapshot is not None:
                community_id = await self._communities.find_id_by_snapshot(snapshot.id)
        return community_id

    async def _ensure_manager(self, community_id: Optional[str], username: str, flid: Optional[str]) -> None:
        if await self._identity.is_admin(username):
            return
        if self._identity.is_community_id_matching_with_flid(community_id, flid):
            return
        raise ForbiddenError()

    @inventory_error_handler("create static proxy")
    async def create(
        self,
        resiloc_proxy_id: str,
        type: StaticProxyType,
        visibility: Optional[Visibility] = None,
    ) -> StaticProxy:
        """Instantiate a template with an independent copy of its metadata.

        Without ``visibility`` the instance takes the template's visibility.
        """
        resiloc_proxy = await self._resiloc_proxies.get_by_id(resiloc_proxy_id)
        if resiloc_proxy is None:
            raise NotFoundError(f"Resiloc proxy {resiloc_proxy_id} does not exist")

        static_proxy = StaticProxy(
            resiloc_proxy_id=resiloc_proxy.id,
            type=type,
            visibility=visibility or resiloc_proxy.visibility,
            metadata=resiloc_proxy.metadata.copy(),
        )
        created = await self._repository.create(static_proxy)
        logger.info(f"Created {created.type.value} {created.id} from resiloc proxy {resiloc_proxy_id}")
        return created

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[StaticProxy]:
        return OffsetPaginationResponse.from_items(await self._repository.find_all(), pagination)

    async def find_public(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[StaticProxy]:
        items = await self._repository.find_by_visibility(Visibility.PUBLIC)
        return OffsetPaginationResponse.from_items(items, pagination)

    @inventory_error_handler("get static proxy")
    async def get_static_proxy(self, static_proxy_id: str, username: str, flid: Optional[str] = None) -> StaticProxy:
        static_proxy = await self.require(static_proxy_id)
        await self._ensure_manager(await self.community_of(static_proxy_id), username, flid)
        return static_proxy

    async def _grouped_by_followed_community(self, username: str, caller: str) -> List[Dict[str, Any]]:
        if not await self._identity.is_self_or_admin(username, caller):
            raise ForbiddenError()
        user = await self._identity.require_user(username)

        groups = []
        for community in await self._communities.find_followed_by(user.id):
            static_proxies = await self._repository.get_by_ids(list(community.static_proxies.values()))
            visible = VisibilityPolicy.filter_community_level(
                static_proxies, _visibility_of, False, user.roles_in(community.id)
            )
            groups.append({"id": community.id, "name": community.name, "staticProxies": visible})
        return groups

    @inventory_error_handler("get static proxies of user")
    async def get_static_proxies_of_user(self, username: str, caller: str) -> List[Dict[str, Any]]:
        """Community configurations of every community the user follows.

        Draft and internal instances are only listed where the user is a
        local manager or resilience expert.
        """
        groups = await self._grouped_by_followed_community(username, caller)
        for group in groups:
            group["staticProxies"] = [static_proxy.to_dict() for static_proxy in group["staticProxies"]]
        return groups

    @inventory_error_handler("get static proxy ids of user")
    async def get_static_proxy_ids_of_user(self, username: str, caller: str) -> List[Dict[str, Any]]:
        groups = await self._grouped_by_followed_community(username, caller)
        return [
            {
                "id": group["id"],
                "name": group["name"],
                "staticProxyIds": [static_proxy.id for static_proxy in group["staticProxies"]],
            }
            for group in groups
        ]

    @inventory_error_handler("get static proxies of community")
    async def get_static_proxies_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[StaticProxy]:
        community_id = self._identity.resolve_community_id(community_id, flid)
        await self._ensure_manager(community_id, username, flid)
        community = await self._communities.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community id {community_id} does not exist")

        is_admin = await self._identity.is_admin(username)
        roles = await self._identity.get_user_roles_by_community(username, community_id)
        static_proxies = await self._repository.get_by_ids(list(community.static_proxies.values()))
        items = VisibilityPolicy.filter_community_level(static_proxies, _visibility_of, is_admin, roles)
        return OffsetPaginationResponse.from_items(items, pagination)

    @inventory_error_handler("get static proxies of snapshot")
    async def get_static_proxies_of_snapshot(
        self,
        snapshot_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[StaticProxy]:
        snapshot = await self._snapshots.get_by_id(snapshot_id)
        if snapshot is None:
            raise NotFoundError(f"Snapshot {snapshot_id} does not exist")
        await self._ensure_manager(await self._communities.find_id_by_snapshot(snapshot_id), username, flid)
        items = await self._repository.get_by_ids(snapshot.static_proxy_ids)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def apply_snapshot_values(self, static_proxy: StaticProxy, changes: Dict[str, Any]) -> StaticProxy:
        """Write value, targets, visibility and editable metadata values.

        Supplying a value for a static metadata field is an error; blank
        values leave the stored ones in place.
        """
        supplied = _supplied_metadata(changes.get("metadata"))
        if supplied is not None:
            static_proxy.metadata = MetadataRules.apply_instance_values(
                static_proxy.id, static_proxy.metadata, supplied
            )
            MetadataRules.check_period(static_proxy.metadata)

        for key in INSTANCE_FIELDS:
            if changes.get(key) is None:
                continue
            value = parse_enum(Visibility, changes[key], "visibility") if key == "visibility" else changes[key]
            setattr(static_proxy, key, value)
        CatalogValidationRules.validate_targets(static_proxy.min_target, static_proxy.max_target)
        return await self._repository.update(static_proxy)

    @inventory_error_handler("update static proxy of snapshot")
    async def update_static_proxy_of_snapshot(
        self,
        static_proxy_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> StaticProxy:
        static_proxy = await self.require(static_proxy_id)
        if static_proxy.is_community_proxy:
            raise BadRequestError("This endpoint is used for updating static proxies of snapshots only")
        await self._ensure_manager(await self.community_of(static_proxy_id), username, flid)

        snapshot = await self._snapshots.find_by_static_proxy(static_proxy_id)
        if snapshot is not None and snapshot.is_submitted:
            raise BadRequestError("Can not update a static proxy of a submitted snapshot")

        updated = await self.apply_snapshot_values(static_proxy, changes)
        logger.info(f"Updated static proxy {static_proxy_id} of snapshot")
        return updated

    @inventory_error_handler("update static proxy of community")
    async def update_static_proxy_of_community(
        self,
        static_proxy_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> StaticProxy:
        """Edit a community configuration.

        Supplied metadata fields replace the stored ones (types included);
        values of required fields are dropped since they are only filled in
        on snapshots.
        """
        static_proxy = await self.require(static_proxy_id)
        if static_proxy.is_snapshot_proxy:
            raise BadRequestError("This endpoint is used for updating community configuration only")
        await self._ensure_manager(await self.community_of(static_proxy_id), username, flid)

        supplied = _supplied_metadata(changes.get("metadata"))
        if supplied is not None:
            merged = static_proxy.metadata.copy()
            merged.fields.update(supplied.copy().fields)
            merged = MetadataRules.strip_required_values(merged)
            MetadataRules.validate_template(merged)
            static_proxy.metadata = merged

        for key in INSTANCE_FIELDS:
            if changes.get(key) is None:
                continue
            value = parse_enum(Visibility, changes[key], "visibility") if key == "visibility" else changes[key]
            setattr(static_proxy, key, value)
        CatalogValidationRules.validate_targets(static_proxy.min_target, static_proxy.max_target)

        updated = await self._repository.update(static_proxy)
        logger.info(f"Updated community configuration {static_proxy_id}")
        return updated

    @inventory_error_handler("remove static proxy")
    async def remove(self, static_proxy_id: str) -> bool:
        await self.require(static_proxy_id)
        deleted = await self._repository.delete(static_proxy_id)
        logger.info(f"Removed static proxy {static_proxy_id}")
        return deleted

    async def remove_many(self, static_proxy_ids: Iterable[str]) -> int:
        ids = list(static_proxy_ids)
        if not ids:
            return 0
        deleted = await self._repository.delete_many(ids)
        logger.info(f"Removed {deleted} static proxies")
        return deleted

    async def clone_static_proxy_for_snapshot(
        self,
        static_proxy: StaticProxy,
        value: Optional[float],
        visibility: Visibility,
        metadata_values: Any = None,
    ) -> StaticProxy:
        """Persist a snapshot-scoped copy of a community configuration."""
        clone = StaticProxy(
            resiloc_proxy_id=static_proxy.resiloc_proxy_id,
            type=StaticProxyType.PROXY_OF_SNAPSHOT,
            value=value,
            min_target=static_proxy.min_target,
            max_target=static_proxy.max_target,
            visibility=visibility,
            metadata=MetadataRules.merge_instance_values(
                static_proxy.metadata, _supplied_metadata(metadata_values)
            ),
        )
        return await self._repository.create(clone)

    async def get_by_ids(self, static_proxy_ids: Iterable[str]) -> List[StaticProxy]:
        return await self._repository.get_by_ids(list(static_proxy_ids))

    async def get_resiloc_proxy_ids(self, static_proxy_ids: Iterable[str]) -> List[str]:
        ids = list(static_proxy_ids)
        if not ids:
            return []
        return [static_proxy.resiloc_proxy_id for static_proxy in await self._repository.get_by_ids(ids)]

    @staticmethod
    def ensure_value_within_targets(static_proxy: StaticProxy, value: Optional[float]) -> None:
        if value is None:
            return
        if static_proxy.min_target is not None and value < static_proxy.min_target:
            raise BadRequestError(f"Value of static proxy {static_proxy.id} is smaller than min target")
        if static_proxy.max_target is not None and value > static_proxy.max_target:
            raise BadRequestError(f"Value of static proxy {static_proxy.id} is larger than max target")

    @staticmethod
    def ensure_min_max_and_metadata_complete(static_proxy: StaticProxy) -> None:
        if static_proxy.min_target is None:
            raise BadRequestError(f"Min target of static proxy {static_proxy.id} is not filled in")
        if static_proxy.max_target is None:
            raise BadRequestError(f"Max target of static proxy {static_proxy.id} is not filled in")
        MetadataRules.ensure_instance_complete(static_proxy.id, static_proxy.metadata)

    @staticmethod
    def check_ready_for_submitting_snapshot(static_proxy: StaticProxy) -> None:
        """Submission gate of a snapshot-scoped static proxy."""
        if static_proxy.value is None:
            raise BadRequestError(f"Value of static proxy {static_proxy.id} is empty")
        StaticProxiesService.ensure_value_within_targets(static_proxy, static_proxy.value)
        if static_proxy.visibility == Visibility.DRAFT:
            raise BadRequestError(f"Static proxy {static_proxy.id} is still in the draft visibility")
        MetadataRules.ensure_ready_for_submission(static_proxy.id, static_proxy.metadata)
