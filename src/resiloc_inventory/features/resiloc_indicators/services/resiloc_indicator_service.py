"""Indicator template service.

Mirrors the proxy template lifecycle: admins curate verified templates,
communities request drafts. An indicator template groups proxy templates;
the grouping is replaced as a whole by
``assign_resiloc_proxies_for_resiloc_indicator``.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from ....utils.enums import parse_enum, parse_optional_enum
from ...catalog.entities.enums import IndicatorContext, IndicatorCriteria, IndicatorDimension, TemplateStatus, Visibility
from ...catalog.utils.listing import collect_tags, visible_to_communities, with_status, with_tag
from ...catalog.utils.validation import CatalogValidationRules, ensure_no_duplicates, parse_status_filter
from ...communities.entities.community import CommunitySetField
from ...communities.entities.protocols import CommunityRepository
from ...identity.services.identity_service import IdentityService
from ...indicators.entities.protocols import IndicatorRepository
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse, SortOrder
from ...policy.services.policy import VisibilityPolicy
from ...resiloc_proxies.entities.protocols import ResilocProxyRepository
from ...resiloc_scenarios.entities.protocols import ResilocScenarioRepository
from ..entities.protocols import ResilocIndicatorRepository
from ..entities.resiloc_indicator import ResilocIndicator

logger = logging.getLogger(__name__)

LABEL = "resiloc indicator"
UPDATABLE_FIELDS = ("name", "description", "context", "criteria", "dimension", "tags", "visibility")


class ResilocIndicatorService:
    """Service for indicator templates."""

    def __init__(
        self,
        repository: ResilocIndicatorRepository,
        resiloc_proxy_repository: ResilocProxyRepository,
        indicator_repository: IndicatorRepository,
        resiloc_scenario_repository: ResilocScenarioRepository,
        community_repository: CommunityRepository,
        identity: IdentityService,
        all_statuses_token: str = "default",
    ):
        self._repository = repository
        self._resiloc_proxies = resiloc_proxy_repository
        self._indicators = indicator_repository
        self._resiloc_scenarios = resiloc_scenario_repository
        self._communities = community_repository
        self._identity = identity
        self._all_statuses_token = all_statuses_token

    async def _require(self, resiloc_indicator_id: str) -> ResilocIndicator:
        resiloc_indicator = await self._repository.get_by_id(resiloc_indicator_id)
        if resiloc_indicator is None:
            raise NotFoundError(f"Resiloc indicator {resiloc_indicator_id} does not exist")
        return resiloc_indicator

    async def _is_owner(self, resiloc_indicator_id: str, flid: Optional[str]) -> bool:
        community_id = await self._communities.find_id_by_requested_indicator(resiloc_indicator_id)
        return self._identity.is_community_id_matching_with_flid(community_id, flid)

    async def _ensure_editable(self, resiloc_indicator: ResilocIndicator, username: str, flid: Optional[str]) -> bool:
        """Gate for edits; returns whether the caller is an admin."""
        is_admin = await self._identity.is_admin(username)
        is_owner = not is_admin and await self._is_owner(resiloc_indicator.id, flid)
        VisibilityPolicy.ensure_template_mutable(
            resiloc_indicator.status, resiloc_indicator.visibility, is_admin, is_owner,
            allowed_statuses={TemplateStatus.REQUESTED},
        )
        return is_admin

    async def _is_used(self, resiloc_indicator_id: str) -> bool:
        return await self._indicators.exists_for_resiloc_indicator(resiloc_indicator_id)

    @inventory_error_handler("create resiloc indicator")
    async def create(self, data: Dict[str, Any], username: str, flid: Optional[str] = None) -> ResilocIndicator:
        is_admin = await self._identity.is_admin(username)
        status, forced_visibility = VisibilityPolicy.creation_status(is_admin)

        community_id = None
        if not is_admin:
            community_id = self._identity.require_community_of_flid(flid)
            if await self._communities.get_by_id(community_id) is None:
                raise NotFoundError(f"Community id {community_id} does not exist")

        resiloc_indicator = ResilocIndicator(
            name=data.get("name"),
            context=parse_enum(IndicatorContext, data.get("context"), "context"),
            criteria=parse_enum(IndicatorCriteria, data.get("criteria"), "criteria"),
            description=data.get("description") or "",
            dimension=data.get("dimension"),
            tags=CatalogValidationRules.normalize_tags(data.get("tags")),
            status=status,
            visibility=(
                forced_visibility
                or parse_optional_enum(Visibility, data.get("visibility"), "visibility")
                or Visibility.DRAFT
            ),
        )
        created = await self._repository.create(resiloc_indicator)

        if community_id is not None:
            await self._communities.add_to_set(community_id, CommunitySetField.REQUESTED_INDICATORS, created.id)
            logger.info(f"Resiloc indicator {created.id} requested by community {community_id}")
        return created

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocIndicator]:
        return OffsetPaginationResponse.from_items(await self._repository.find_all(), pagination)

    async def get_visible(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocIndicator]:
        items = visible_to_communities(await self._repository.find_all())
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_visible_by_tag(
        self, tag: str, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[ResilocIndicator]:
        items = with_tag(visible_to_communities(await self._repository.find_all()), tag)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_verified(
        self, username: str, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[ResilocIndicator]:
        is_admin = await self._identity.is_admin(username)
        items = with_status(await self._repository.find_all(), TemplateStatus.VERIFIED, is_admin)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_accepted(
        self, username: str, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[ResilocIndicator]:
        is_admin = await self._identity.is_admin(username)
        items = with_status(await self._repository.find_all(), TemplateStatus.ACCEPTED, is_admin)
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_requested(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocIndicator]:
        items = with_status(await self._repository.find_all(), TemplateStatus.REQUESTED)
        return OffsetPaginationResponse.from_items(items, pagination)

    @inventory_error_handler("get requested resiloc indicators of community")
    async def get_requested_by_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[ResilocIndicator]:
        community_id = self._identity.resolve_community_id(community_id, flid)
        if not (
            await self._identity.is_admin(username)
            or self._identity.is_community_id_matching_with_flid(community_id, flid)
        ):
            raise ForbiddenError()

        wanted = parse_status_filter(statuses, self._all_statuses_token)
        community = await self._communities.get_by_id(community_id)
        requested_ids = community.requested_indicators if community else []
        items = [
            resiloc_indicator for resiloc_indicator in await self._repository.get_by_ids(requested_ids)
            if resiloc_indicator.status in wanted
        ]
        return OffsetPaginationResponse.from_items(items, pagination)

    async def get_by_tag(self, tag: str, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[ResilocIndicator]:
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

    @inventory_error_handler("get resiloc indicator")
    async def get_resiloc_indicator(
        self, resiloc_indicator_id: str, username: str, flid: Optional[str] = None
    ) -> ResilocIndicator:
        resiloc_indicator = await self._require(resiloc_indicator_id)
        is_admin = await self._identity.is_admin(username)
        is_owner = not is_admin and await self._is_owner(resiloc_indicator_id, flid)
        VisibilityPolicy.ensure_template_readable(
            LABEL, resiloc_indicator.status, resiloc_indicator.visibility, is_admin, is_owner
        )
        return resiloc_indicator

    @inventory_error_handler("update resiloc indicator")
    async def update(
        self,
        resiloc_indicator_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> ResilocIndicator:
        """Edit a template; the context/criteria pair is re-checked afterwards."""
        resiloc_indicator = await self._require(resiloc_indicator_id)
        is_admin = await self._ensure_editable(resiloc_indicator, username, flid)

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
            elif key == "context":
                value = parse_enum(IndicatorContext, value, "context")
            elif key == "criteria":
                value = parse_enum(IndicatorCriteria, value, "criteria")
            elif key == "dimension":
                value = IndicatorDimension(value)
            elif key == "visibility":
                value = parse_enum(Visibility, value, "visibility")
            setattr(resiloc_indicator, key, value)
        CatalogValidationRules.validate_context_criteria(resiloc_indicator.context, resiloc_indicator.criteria)

        updated = await self._repository.update(resiloc_indicator)
        logger.info(f"Updated resiloc indicator {updated.id}")
        return updated

    @inventory_error_handler("update resiloc indicator status")
    async def update_status(self, resiloc_indicator_id: str, status: TemplateStatus) -> ResilocIndicator:
        resiloc_indicator = await self._require(resiloc_indicator_id)
        target = parse_enum(TemplateStatus, status, "status")
        in_use = await self._is_used(resiloc_indicator_id)
        VisibilityPolicy.ensure_status_transition("indicator", resiloc_indicator.status, target, in_use)

        previous = resiloc_indicator.status
        resiloc_indicator.status = target
        updated = await self._repository.update(resiloc_indicator)
        logger.info(
            f"Resiloc indicator {resiloc_indicator_id} status changed from {previous.value} to {target.value}"
        )
        return updated

    @inventory_error_handler("assign resiloc proxies for resiloc indicator")
    async def assign_resiloc_proxies_for_resiloc_indicator(
        self,
        resiloc_indicator_id: str,
        resiloc_proxy_ids: List[str],
        username: str,
        flid: Optional[str] = None,
    ) -> ResilocIndicator:
        """Replace the proxy templates of an indicator template.

        Duplicates are rejected before anything else; every listed proxy must
        be assignable. Existing links keep their position, new ones are
        appended.
        """
        resiloc_indicator = await self._require(resiloc_indicator_id)
        await self._ensure_editable(resiloc_indicator, username, flid)

        ensure_no_duplicates(resiloc_proxy_ids, "resiloc proxy ids")
        for resiloc_proxy_id in resiloc_proxy_ids:
            resiloc_proxy = await self._resiloc_proxies.get_by_id(resiloc_proxy_id)
            if resiloc_proxy is None:
                raise NotFoundError(f"Resiloc proxy {resiloc_proxy_id} does not exist")
            VisibilityPolicy.ensure_assignable(
                "resiloc proxy", resiloc_proxy_id, resiloc_proxy.status, resiloc_proxy.visibility
            )

        desired = set(resiloc_proxy_ids)
        current = list(resiloc_indicator.resiloc_proxy_ids)
        existing = set(current)
        added = [resiloc_proxy_id for resiloc_proxy_id in resiloc_proxy_ids if resiloc_proxy_id not in existing]
        removed = [resiloc_proxy_id for resiloc_proxy_id in current if resiloc_proxy_id not in desired]

        resiloc_indicator.resiloc_proxy_ids = [
            resiloc_proxy_id for resiloc_proxy_id in current if resiloc_proxy_id in desired
        ] + added
        updated = await self._repository.update(resiloc_indicator)
        logger.info(
            f"Resiloc indicator {resiloc_indicator_id}: added {len(added)} and removed {len(removed)} resiloc proxies"
        )
        return updated

    @inventory_error_handler("remove resiloc indicator")
    async def remove(self, resiloc_indicator_id: str, username: str, flid: Optional[str] = None) -> bool:
        resiloc_indicator = await self._require(resiloc_indicator_id)
        if await self._is_used(resiloc_indicator_id):
            raise BadRequestError(f"Resiloc indicator {resiloc_indicator_id} is being used by at least one community")
        if await self._resiloc_scenarios.exists_with_resiloc_indicator(resiloc_indicator_id):
            raise BadRequestError(
                f"Resiloc indicator {resiloc_indicator_id} is linked to at least one resiloc scenario"
            )

        is_admin = await self._identity.is_admin(username)
        community_id = await self._communities.find_id_by_requested_indicator(resiloc_indicator_id)
        is_owner = self._identity.is_community_id_matching_with_flid(community_id, flid)
        VisibilityPolicy.ensure_template_mutable(
            resiloc_indicator.status, resiloc_indicator.visibility, is_admin, is_owner
        )

        if community_id is not None:
            await self._communities.pull_from_set(
                community_id, CommunitySetField.REQUESTED_INDICATORS, resiloc_indicator_id
            )
        deleted = await self._repository.delete(resiloc_indicator_id)
        logger.info(f"Removed resiloc indicator {resiloc_indicator_id}")
        return deleted
