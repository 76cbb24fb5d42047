"""Proxy template service.

Admins curate the catalog directly; community members request new proxy
templates, which stay drafts of their community until an admin changes the
status.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from ....utils.enums import parse_enum, parse_optional_enum
from ...catalog.entities.enums import TemplateStatus, Visibility
from ...catalog.entities.metadata import ProxyMetadata
from ...catalog.utils.listing import collect_tags, visible_to_communities, with_status, with_tag
from ...catalog.utils.metadata_rules import MetadataRules
from ...catalog.utils.validation import CatalogValidationRules, parse_status_filter
from ...communities.entities.community import CommunitySetField
from ...communities.entities.protocols import CommunityRepository
from ...identity.services.identity_service import IdentityService
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse, SortOrder
from ...policy.services.policy import VisibilityPolicy
from ...resiloc_indicators.entities.protocols import ResilocIndicatorRepository
from ..entities.protocols import ResilocProxyRepository
from ..entities.resiloc_proxy import ResilocProxy, UnitOfMeasurement

logger = logging.getLogger(__name__)

LABEL = "resiloc proxy"
UPDATABLE_FIELDS = ("name", "description", "type", "tags", "visibility", "unit_of_measurement", "metadata")


def _template_metadata(raw: Any) -> ProxyMetadata:
    metadata = raw if isinstance(raw, ProxyMetadata) else ProxyMetadata.from_dict(raw)
    MetadataRules.validate_template(metadata)
    return metadata


def _units(raw: Optional[Iterable[Any]]) -> List[UnitOfMeasurement]:
    return [
        unit if isinstance(unit, UnitOfMeasurement) else UnitOfMeasurement.from_dict(unit)
        for unit in (raw or [])
    ]


class ResilocProxyService:
    """Service for proxy templates: lifecycle, listings and access rules."""

    def __init__(
        self,
        repository: ResilocProxyRepository,
        community_repository: CommunityRepository,
        resiloc_indicator_repository: ResilocIndicatorRepository,
        identity: IdentityService,
        all_statuses_token: str = "default",
    ):
        self._repository = repository
        self._communities = community_repository
        self._resiloc_indicators = resiloc_indicator_repository
        self._identity = identity
        self._all_statuses_token = all_statuses_token

    async def _require(self, resiloc_proxy_id: str) -> ResilocProxy:
        resiloc_proxy = await self._repository.get_by_id(resiloc_proxy_id)
        if resiloc_proxy is None:
            raise NotFoundError(f"Resiloc proxy {resiloc_proxy_id} does not exist")
        return resiloc_proxy

    async def _is_owner(self, resiloc_proxy_id: str, flid: Optional[str]) -> bool:
        community_id = await self._communities.find_id_by_requested_proxy(resiloc_proxy_id)
        return self._identity.is_community_id_matching_with_flid(community_id, flid)

    @inventory_error_handler("create resiloc proxy")
    async def create(self, data: Dict[str, Any], username: str, flid: Optional[str] = None) -> ResilocProxy:
        """Create a template.

        Admins create verified templates. Anyone else creates a requested
        draft that is recorded on the community carried by ``flid``.
        """
        is_admin = await self._identity.is_admin(username)
        status, forced_visibility = VisibilityPolicy.creation_status(is_admin)

        community_id = None
        if not is_admin:
            community_id = self._identity.require_community_of_flid(flid)
            if await self._communities.get_by_id(community_id) is None:
                raise NotFoundError(f"Community id {community_id} does not exist")

        resiloc_proxy = ResilocProxy(
            name=data.get("name"),
            description=data.get("description") or "",
            type=data.get("type"),
            tags=CatalogValidationRules.normalize_tags(data.get("tags")),
            status=status,
            visibility=(
                forced_visibility
                or parse_optional_enum(Visibility, data.get("visibility"), "visibility")
                or Visibility.DRAFT
            ),
            unit_of_measurement=_units(data.get("unit_of_measurement")),
            metadata=_template_metadata(data.get("metadata")),
        )
        created = await self._repository.create(resiloc_proxy)

        if community_id is not None:
            await self._communities.add_to_set(community_id, CommunitySetField.REQUESTED_PROXIES, created.id)
            logger.info(f"Resiloc proxy {created.id} requested by community {community_id}")
        return created

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocProxy]:
        return OffsetPaginationResponse.from_items(await self._repository.find_all(), pagination)

    async def get_visible(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocProxy]:
        items = visible_to_communities(await self._repository.find_all())
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_visible_by_tag(
        self, tag: str, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[ResilocProxy]:
        items = with_tag(visible_to_communities(await self._repository.find_all()), tag)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_verified(
        self, username: str, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[ResilocProxy]:
        is_admin = await self._identity.is_admin(username)
        items = with_status(await self._repository.find_all(), TemplateStatus.VERIFIED, is_admin)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_accepted(
        self, username: str, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[ResilocProxy]:
        is_admin = await self._identity.is_admin(username)
        items = with_status(await self._repository.find_all(), TemplateStatus.ACCEPTED, is_admin)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_requested(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocProxy]:
        items = with_status(await self._repository.find_all(), TemplateStatus.REQUESTED)
        return OffsetPaginationResponse.from_items(items, pagination)

    @inventory_error_handler("get requested resiloc proxies of community")
    async def get_requested_by_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[ResilocProxy]:
        community_id = self._identity.resolve_community_id(community_id, flid)
        if not (
            await self._identity.is_admin(username)
            or self._identity.is_community_id_matching_with_flid(community_id, flid)
        ):
            raise ForbiddenError()

        wanted = parse_status_filter(statuses, self._all_statuses_token)
        community = await self._communities.get_by_id(community_id)
        requested_ids = community.requested_proxies if community else []
        items = [
            resiloc_proxy for resiloc_proxy in await self._repository.get_by_ids(requested_ids)
            if resiloc_proxy.status in wanted
        ]
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_by_tag(self, tag: str, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocProxy]:
        items = with_tag(await self._repository.find_all(), tag)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_all_tags(
        self,
        username: str,
        order: SortOrder = SortOrder.ASC,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[str]:
        is_admin = await self._identity.is_admin(username)
        tags = collect_tags(await self._repository.find_all(), is_admin, order)
        return OffsetPaginationResponse.from_items(tags, pagination)

    @inventory_error_handler("get resiloc proxy")
    async def get_resiloc_proxy(self, resiloc_proxy_id: str, username: str, flid: Optional[str] = None) -> ResilocProxy:
        resiloc_proxy = await self._require(resiloc_proxy_id)
        is_admin = await self._identity.is_admin(username)
        is_owner = not is_admin and await self._is_owner(resiloc_proxy_id, flid)
        VisibilityPolicy.ensure_template_readable(
            LABEL, resiloc_proxy.status, resiloc_proxy.visibility, is_admin, is_owner
        )
        return resiloc_proxy

    @inventory_error_handler("get selected resiloc proxies of community")
    async def get_selected_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[ResilocProxy]:
        """Templates a community has instantiated."""
        community_id = self._identity.resolve_community_id(community_id, flid)
        community = await self._communities.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community id {community_id} does not exist")
        if not (
            await self._identity.is_admin(username)
            or self._identity.is_community_id_matching_with_flid(community_id, flid)
        ):
            raise ForbiddenError()
        items = await self._repository.get_by_ids(list(community.static_proxies))
        return OffsetPaginationResponse.from_items(items, pagination)

    @inventory_error_handler("update resiloc proxy")
    async def update(
        self,
        resiloc_proxy_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> ResilocProxy:
        """Edit a template.

        Non-admins may only edit their own community's requested drafts and
        cannot move them out of draft. Supplied metadata fields replace the
        stored ones; values of required fields are dropped.
        """
        resiloc_proxy = await self._require(resiloc_proxy_id)
        is_admin = await self._identity.is_admin(username)
        is_owner = not is_admin and await self._is_owner(resiloc_proxy_id, flid)
        VisibilityPolicy.ensure_template_mutable(
            resiloc_proxy.status, resiloc_proxy.visibility, is_admin, is_owner,
            allowed_statuses={TemplateStatus.REQUESTED},
        )

        if changes.get("visibility") is not None and not is_admin:
            if parse_enum(Visibility, changes["visibility"], "visibility") != Visibility.DRAFT:
                raise ForbiddenError(f"Only admin can change the visibility of a {LABEL}")

        for key in UPDATABLE_FIELDS:
            if changes.get(key) is None:
                continue
            value = changes[key]
            if key == "name":
                value = CatalogValidationRules.normalize_name(value)
            elif key == "tags":
                value = CatalogValidationRules.normalize_tags(value)
            elif key == "visibility":
                value = parse_enum(Visibility, value, "visibility")
            elif key == "unit_of_measurement":
                value = _units(value)
            elif key == "metadata":
                supplied = value if isinstance(value, ProxyMetadata) else ProxyMetadata.from_dict(value)
                merged = resiloc_proxy.metadata.copy()
                merged.fields.update(supplied.copy().fields)
                value = MetadataRules.strip_required_values(merged)
                MetadataRules.validate_template(value)
            setattr(resiloc_proxy, key, value)

        updated = await self._repository.update(resiloc_proxy)
        logger.info(f"Updated resiloc proxy {updated.id}")
        return updated

    @inventory_error_handler("update resiloc proxy status")
    async def update_status(self, resiloc_proxy_id: str, status: TemplateStatus) -> ResilocProxy:
        resiloc_proxy = await self._require(resiloc_proxy_id)
        target = parse_enum(TemplateStatus, status, "status")
        in_use = await self._communities.is_resiloc_proxy_used(resiloc_proxy_id)
        VisibilityPolicy.ensure_status_transition("proxy", resiloc_proxy.status, target, in_use)

        previous = resiloc_proxy.status
        resiloc_proxy.status = target
        updated = await self._repository.update(resiloc_proxy)
        logger.info(f"Resiloc proxy {resiloc_proxy_id} status changed from {previous.value} to {target.value}")
        return updated

    @inventory_error_handler("remove resiloc proxy")
    async def remove(self, resiloc_proxy_id: str, username: str, flid: Optional[str] = None) -> bool:
        resiloc_proxy = await self._require(resiloc_proxy_id)
        if await self._communities.is_resiloc_proxy_used(resiloc_proxy_id):
            raise BadRequestError(f"Resiloc proxy {resiloc_proxy_id} is being used by at least one community")
        if await self._resiloc_indicators.exists_with_resiloc_proxy(resiloc_proxy_id):
            raise BadRequestError(f"Resiloc proxy {resiloc_proxy_id} is linked to at least one resiloc indicator")

        is_admin = await self._identity.is_admin(username)
        community_id = await self._communities.find_id_by_requested_proxy(resiloc_proxy_id)
        is_owner = self._identity.is_community_id_matching_with_flid(community_id, flid)
        VisibilityPolicy.ensure_template_mutable(resiloc_proxy.status, resiloc_proxy.visibility, is_admin, is_owner)

        if community_id is not None:
            await self._communities.pull_from_set(community_id, CommunitySetField.REQUESTED_PROXIES, resiloc_proxy_id)
        deleted = await self._repository.delete(resiloc_proxy_id)
        logger.info(f"Removed resiloc proxy {resiloc_proxy_id}")
        return deleted
