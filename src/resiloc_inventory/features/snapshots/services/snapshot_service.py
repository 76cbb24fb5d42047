"""Snapshot service.

A snapshot freezes a selection of a community's configured proxies: each
assigned community instance is cloned into a snapshot-scoped static proxy
that carries its own value. Submitting a snapshot makes it immutable.
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from ....utils.datetime import utc_now
from ....utils.enums import parse_enum, parse_optional_enum
from ...catalog.entities.enums import SnapshotType, SubmissionStatus, Visibility
from ...catalog.entities.metadata import ProxyMetadata
from ...catalog.utils.metadata_rules import MetadataRules
from ...catalog.utils.validation import has_duplicates
from ...communities.entities.community import CommunitySetField
from ...communities.entities.protocols import CommunityRepository
from ...identity.services.identity_service import IdentityService
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse
from ...policy.services.policy import VisibilityPolicy
from ...static_proxies.entities.static_proxy import StaticProxy
from ..entities.protocols import SnapshotRepository
from ..entities.snapshot import Snapshot

if TYPE_CHECKING:
    from ...static_proxies.services.static_proxy_service import StaticProxiesService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "type", "description", "visibility")


def _visibility_of(record: Any) -> Visibility:
    return record.visibility


def _static_proxy_view(static_proxy: StaticProxy) -> Dict[str, Any]:
    data = static_proxy.to_dict()
    data.pop("type", None)
    return data


def _entry_id(entry: Dict[str, Any]) -> str:
    static_proxy_id = entry.get("static_proxy_id")
    if not static_proxy_id:
        raise BadRequestError("Static proxy id is required")
    return static_proxy_id


class SnapshotsService:
    """Service for snapshots and their static proxies."""

    def __init__(
        self,
        repository: SnapshotRepository,
        static_proxies: "StaticProxiesService",
        community_repository: CommunityRepository,
        identity: IdentityService,
    ):
        self._repository = repository
        self._static_proxies = static_proxies
        self._communities = community_repository
        self._identity = identity

    async def _require(self, snapshot_id: str) -> Snapshot:
        snapshot = await self._repository.get_by_id(snapshot_id)
        if snapshot is None:
            raise NotFoundError(f"Snapshot {snapshot_id} does not exist")
        return snapshot

    async def _ensure_manager(self, community_id: Optional[str], username: str, flid: Optional[str]) -> None:
        if await self._identity.is_admin(username):
            return
        if self._identity.is_community_id_matching_with_flid(community_id, flid):
            return
        raise ForbiddenError()

    async def _require_managed(self, snapshot_id: str, username: str, flid: Optional[str]) -> Snapshot:
        snapshot = await self._require(snapshot_id)
        await self._ensure_manager(await self._communities.find_id_by_snapshot(snapshot_id), username, flid)
        return snapshot

    async def _populate(self, snapshot: Snapshot, community_level: bool = False) -> Dict[str, Any]:
        static_proxies = await self._static_proxies.get_by_ids(snapshot.static_proxy_ids)
        if community_level:
            static_proxies = VisibilityPolicy.filter_community_level(static_proxies, _visibility_of, False, set())
        data = snapshot.to_dict()
        data["staticProxies"] = [_static_proxy_view(static_proxy) for static_proxy in static_proxies]
        return data

    @inventory_error_handler("create snapshot")
    async def create(
        self,
        community_id: str,
        data: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> Snapshot:
        """Create an empty on-hold snapshot owned by the community."""
        community_id = self._identity.resolve_community_id(community_id, flid)
        if await self._communities.get_by_id(community_id) is None:
            raise NotFoundError(f"Community id {community_id} does not exist")
        await self._ensure_manager(community_id, username, flid)

        snapshot = Snapshot(
            name=data.get("name"),
            type=parse_enum(SnapshotType, data.get("type"), "snapshot type"),
            description=data.get("description") or "",
            visibility=parse_optional_enum(Visibility, data.get("visibility"), "visibility") or Visibility.DRAFT,
        )
        created = await self._repository.create(snapshot)
        await self._communities.add_to_set(community_id, CommunitySetField.SNAPSHOTS, created.id)
        logger.info(f"Created snapshot {created.id} for community {community_id}")
        return created

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[Snapshot]:
        snapshots = []
        for community in await self._communities.find_all():
            snapshots.extend(await self._repository.get_by_ids(community.snapshots))
        return OffsetPaginationResponse.from_items(snapshots, pagination)

    @inventory_error_handler("get snapshot")
    async def get_snapshot(self, snapshot_id: str, username: str, flid: Optional[str] = None) -> Dict[str, Any]:
        snapshot = await self._require_managed(snapshot_id, username, flid)
        return await self._populate(snapshot)

    async def _grouped_by_followed_community(self, username: str, caller: str) -> List[Dict[str, Any]]:
        if not await self._identity.is_self_or_admin(username, caller):
            raise ForbiddenError()
        user = await self._identity.require_user(username)

        groups = []
        for community in await self._communities.find_followed_by(user.id):
            snapshots = await self._repository.get_by_ids(community.snapshots)
            visible = VisibilityPolicy.filter_community_level(
                snapshots, _visibility_of, False, user.roles_in(community.id)
            )
            groups.append({"id": community.id, "name": community.name, "snapshots": visible})
        return groups

    @inventory_error_handler("get snapshots of user")
    async def get_snapshots_of_user(self, username: str, caller: str) -> List[Dict[str, Any]]:
        groups = await self._grouped_by_followed_community(username, caller)
        for group in groups:
            group["snapshots"] = [await self._populate(snapshot) for snapshot in group["snapshots"]]
        return groups

    @inventory_error_handler("get snapshot ids of user")
    async def get_snapshot_ids_of_user(self, username: str, caller: str) -> List[Dict[str, Any]]:
        groups = await self._grouped_by_followed_community(username, caller)
        return [
            {
                "id": group["id"],
                "name": group["name"],
                "snapshotIds": [snapshot.id for snapshot in group["snapshots"]],
            }
            for group in groups
        ]

    async def _snapshots_of_community(self, community_id: str, username: str, flid: Optional[str]):
        community_id = self._identity.resolve_community_id(community_id, flid)
        await self._ensure_manager(community_id, username, flid)
        community = await self._communities.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community id {community_id} does not exist")
        return community_id, await self._repository.get_by_ids(community.snapshots)

    @inventory_error_handler("get snapshots of community")
    async def get_snapshots_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        """Snapshots of a community with their static proxies.

        Callers without a privileged role only see community-level snapshots
        and community-level static proxies inside them.
        """
        community_id, snapshots = await self._snapshots_of_community(community_id, username, flid)
        is_admin = await self._identity.is_admin(username)
        roles = await self._identity.get_user_roles_by_community(username, community_id)
        community_level = not VisibilityPolicy.has_privileged_community_access(is_admin, roles)

        visible = VisibilityPolicy.filter_community_level(snapshots, _visibility_of, is_admin, roles)
        page = OffsetPaginationResponse.from_items(visible, pagination)
        return replace(page, items=[await self._populate(snapshot, community_level) for snapshot in page.items])

    async def _with_status(
        self,
        status: SubmissionStatus,
        community_id: str,
        username: str,
        flid: Optional[str],
        pagination: Optional[OffsetPaginationRequest],
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        _, snapshots = await self._snapshots_of_community(community_id, username, flid)
        page = OffsetPaginationResponse.from_items(
            [snapshot for snapshot in snapshots if snapshot.status == status], pagination
        )
        return replace(page, items=[await self._populate(snapshot) for snapshot in page.items])

    @inventory_error_handler("get on hold snapshots of community")
    async def get_on_hold_snapshots_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        return await self._with_status(SubmissionStatus.ON_HOLD, community_id, username, flid, pagination)

    @inventory_error_handler("get submitted snapshots of community")
    async def get_submitted_snapshots_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        return await self._with_status(SubmissionStatus.SUBMITTED, community_id, username, flid, pagination)

    @inventory_error_handler("update snapshot")
    async def update(
        self,
        snapshot_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> Snapshot:
        """Edit general attributes and the values of assigned static proxies.

        ``changes["static_proxies"]`` is a list of ``{static_proxy_id, value,
        metadata}`` entries; every entry is checked before anything is written.
        """
        snapshot = await self._require_managed(snapshot_id, username, flid)
        if snapshot.is_submitted:
            raise BadRequestError("Can not update a submitted snapshot")

        entries = changes.get("static_proxies") or []
        ids = [_entry_id(entry) for entry in entries]
        if has_duplicates(ids):
            raise BadRequestError("Array of static proxies contains duplicate static proxy id values")
        targets = {}
        for entry, static_proxy_id in zip(entries, ids):
            if static_proxy_id not in snapshot.static_proxy_ids:
                raise NotFoundError(f"Static proxy id {static_proxy_id} does not exist in this snapshot")
            static_proxy = await self._static_proxies.require(static_proxy_id)
            supplied = _metadata_of(entry)
            MetadataRules.ensure_no_static_values(static_proxy.id, static_proxy.metadata, supplied)
            if supplied is not None:
                MetadataRules.check_period(supplied)
            self._static_proxies.ensure_value_within_targets(static_proxy, entry.get("value"))
            targets[static_proxy_id] = static_proxy

        for key in UPDATABLE_FIELDS:
            if changes.get(key) is None:
                continue
            value = changes[key]
            if key == "type":
                value = parse_enum(SnapshotType, value, "snapshot type")
            elif key == "visibility":
                value = parse_enum(Visibility, value, "visibility")
            setattr(snapshot, key, value)
        updated = await self._repository.update(snapshot)

        for entry, static_proxy_id in zip(entries, ids):
            await self._static_proxies.apply_snapshot_values(
                targets[static_proxy_id],
                {"value": entry.get("value"), "metadata": entry.get("metadata")},
            )
        logger.info(f"Updated snapshot {snapshot_id} ({len(entries)} static proxies)")
        return updated

    async def _check_assignable(self, community_id: str, entry: Dict[str, Any]) -> StaticProxy:
        static_proxy_id = _entry_id(entry)
        static_proxy = await self._static_proxies.require(static_proxy_id)
        if static_proxy.visibility == Visibility.DRAFT:
            raise BadRequestError(f"Static proxy {static_proxy_id} is in draft visibility")
        community = await self._communities.get_by_id(community_id)
        if community is None or static_proxy_id not in community.static_proxies.values():
            raise BadRequestError(f"Static proxy {static_proxy_id} does not exist in community {community_id}")
        if not static_proxy.is_community_proxy:
            raise BadRequestError(f"Static proxy {static_proxy_id} is not valid")

        supplied = _metadata_of(entry)
        MetadataRules.ensure_no_static_values(static_proxy.id, static_proxy.metadata, supplied)
        if supplied is not None:
            MetadataRules.check_period(supplied)
        self._static_proxies.ensure_min_max_and_metadata_complete(static_proxy)
        self._static_proxies.ensure_value_within_targets(static_proxy, entry.get("value"))
        return static_proxy

    @inventory_error_handler("assign static proxies for snapshot")
    async def assign_static_proxies_for_snapshot(
        self,
        snapshot_id: str,
        entries: List[Dict[str, Any]],
        username: str,
        flid: Optional[str] = None,
    ) -> Snapshot:
        """Clone community configurations into the snapshot.

        A snapshot holds at most one static proxy per proxy template.
        """
        snapshot = await self._require(snapshot_id)
        if snapshot.is_submitted:
            raise BadRequestError("Can not add more static proxies to a submitted snapshot")
        community_id = await self._communities.find_id_by_snapshot(snapshot_id)
        await self._ensure_manager(community_id, username, flid)
        if not entries:
            raise BadRequestError("No static proxies were requested")

        sources = [await self._check_assignable(community_id, entry) for entry in entries]
        if has_duplicates(source.id for source in sources):
            raise BadRequestError("Array of static proxies contains duplicate static proxy id values")

        assigned = set(await self._static_proxies.get_resiloc_proxy_ids(snapshot.static_proxy_ids))
        for source in sources:
            if source.resiloc_proxy_id in assigned:
                raise BadRequestError(
                    f"Static proxy {source.id} was added in this snapshot "
                    f"(type: resiloc proxy {source.resiloc_proxy_id})"
                )

        for source, entry in zip(sources, entries):
            clone = await self._static_proxies.clone_static_proxy_for_snapshot(
                source, entry.get("value"), source.visibility, entry.get("metadata")
            )
            snapshot.static_proxy_ids.append(clone.id)
        updated = await self._repository.update(snapshot)
        logger.info(f"Assigned {len(sources)} static proxies to snapshot {snapshot_id}")
        return updated

    @inventory_error_handler("remove static proxies from snapshot")
    async def remove_static_proxies_from_snapshot(
        self,
        snapshot_id: str,
        static_proxy_ids: List[str],
        username: str,
        flid: Optional[str] = None,
    ) -> Snapshot:
        snapshot = await self._require(snapshot_id)
        if snapshot.is_submitted:
            raise BadRequestError("Can not remove static proxies from a submitted snapshot")
        await self._ensure_manager(await self._communities.find_id_by_snapshot(snapshot_id), username, flid)
        if not static_proxy_ids:
            raise BadRequestError("No static proxies were requested")
        for static_proxy_id in static_proxy_ids:
            if static_proxy_id not in snapshot.static_proxy_ids:
                raise NotFoundError(f"Static proxy {static_proxy_id} does not exist in this snapshot")

        await self._static_proxies.remove_many(static_proxy_ids)
        removed = set(static_proxy_ids)
        snapshot.static_proxy_ids = [
            static_proxy_id for static_proxy_id in snapshot.static_proxy_ids if static_proxy_id not in removed
        ]
        return await self._repository.update(snapshot)

    @inventory_error_handler("submit snapshot")
    async def submit_snapshot(self, snapshot_id: str, username: str, flid: Optional[str] = None) -> Snapshot:
        """Check every static proxy against the submission gate, then freeze."""
        snapshot = await self._require_managed(snapshot_id, username, flid)
        if snapshot.is_submitted:
            raise BadRequestError(f"Snapshot {snapshot_id} is already submitted")

        for static_proxy_id in snapshot.static_proxy_ids:
            static_proxy = await self._static_proxies.require(static_proxy_id)
            self._static_proxies.check_ready_for_submitting_snapshot(static_proxy)

        snapshot.status = SubmissionStatus.SUBMITTED
        snapshot.date_submitted = utc_now()
        submitted = await self._repository.update(snapshot)
        logger.info(f"Submitted snapshot {snapshot_id}")
        return submitted

    async def purge(self, snapshot: Snapshot, community_id: Optional[str]) -> None:
        """Delete a snapshot with its static proxies; safe to repeat."""
        if community_id is not None:
            await self._communities.pull_from_set(community_id, CommunitySetField.SNAPSHOTS, snapshot.id)
        await self._static_proxies.remove_many(snapshot.static_proxy_ids)
        await self._repository.delete(snapshot.id)

    @inventory_error_handler("remove snapshot")
    async def remove(self, snapshot_id: str, username: str, flid: Optional[str] = None) -> bool:
        snapshot = await self._require(snapshot_id)
        community_id = await self._communities.find_id_by_snapshot(snapshot_id)
        await self._ensure_manager(community_id, username, flid)
        await self.purge(snapshot, community_id)
        logger.info(f"Removed snapshot {snapshot_id} with {len(snapshot.static_proxy_ids)} static proxies")
        return True

    async def get_by_ids(self, snapshot_ids: Iterable[str]) -> List[Snapshot]:
        return await self._repository.get_by_ids(list(snapshot_ids))


def _metadata_of(entry: Dict[str, Any]) -> Optional[ProxyMetadata]:
    raw = entry.get("metadata")
    if raw is None:
        return None
    return raw if isinstance(raw, ProxyMetadata) else ProxyMetadata.from_dict(raw)
