"""Scenario template service.

Scenario templates are curated by admins only; communities instantiate
them. Every (indicator, proxy) pair below a template carries a weight row
keyed by the composite id of the triple.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import BadRequestError, NotFoundError
from ....utils.enums import parse_enum, parse_optional_enum
from ....utils.uuid import composite_id
from ...catalog.entities.enums import TemplateStatus, Visibility
from ...catalog.utils.validation import CatalogValidationRules, ensure_no_duplicates
from ...communities.entities.protocols import CommunityRepository
from ...identity.services.identity_service import IdentityService
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse
from ...policy.services.policy import VisibilityPolicy
from ...resiloc_indicators.entities.protocols import ResilocIndicatorRepository
from ...resiloc_indicators.entities.resiloc_indicator import ResilocIndicator
from ...resiloc_proxies.entities.protocols import ResilocProxyRepository
from ..entities.protocols import ResilocScenarioIndicatorProxyRepository, ResilocScenarioRepository
from ..entities.resiloc_scenario import ResilocScenario, ResilocScenarioIndicatorProxy

logger = logging.getLogger(__name__)

LABEL = "resiloc scenario"
LINK_ATTRIBUTE = "scenarioIndicatorProxy"


class ResilocScenarioService:
    """Service for scenario templates and their weights."""

    def __init__(
        self,
        repository: ResilocScenarioRepository,
        link_repository: ResilocScenarioIndicatorProxyRepository,
        resiloc_indicator_repository: ResilocIndicatorRepository,
        resiloc_proxy_repository: ResilocProxyRepository,
        community_repository: CommunityRepository,
        identity: IdentityService,
    ):
        self._repository = repository
        self._links = link_repository
        self._resiloc_indicators = resiloc_indicator_repository
        self._resiloc_proxies = resiloc_proxy_repository
        self._communities = community_repository
        self._identity = identity

    async def _require(self, resiloc_scenario_id: str) -> ResilocScenario:
        resiloc_scenario = await self._repository.get_by_id(resiloc_scenario_id)
        if resiloc_scenario is None:
            raise NotFoundError(f"Resiloc scenario {resiloc_scenario_id} does not exist")
        return resiloc_scenario

    @staticmethod
    def _link_ids(resiloc_scenario_id: str, resiloc_indicator: ResilocIndicator) -> List[str]:
        return [
            composite_id(resiloc_scenario_id, resiloc_indicator.id, resiloc_proxy_id)
            for resiloc_proxy_id in resiloc_indicator.resiloc_proxy_ids
        ]

    async def populate(self, resiloc_scenario: ResilocScenario) -> Dict[str, Any]:
        """Template view with its indicators, their proxies and the weights."""
        data = resiloc_scenario.to_dict()
        indicators = []
        for resiloc_indicator in await self._resiloc_indicators.get_by_ids(resiloc_scenario.resiloc_indicator_ids):
            links = {
                link.id: link
                for link in await self._links.get_by_ids(self._link_ids(resiloc_scenario.id, resiloc_indicator))
            }
            proxies = []
            for resiloc_proxy in await self._resiloc_proxies.get_by_ids(resiloc_indicator.resiloc_proxy_ids):
                proxy = resiloc_proxy.to_dict()
                link = links.get(composite_id(resiloc_scenario.id, resiloc_indicator.id, resiloc_proxy.id))
                proxy[LINK_ATTRIBUTE] = link.to_dict() if link else None
                proxies.append(proxy)
            indicator = resiloc_indicator.to_dict()
            indicator["resilocProxies"] = proxies
            indicators.append(indicator)
        data["resilocIndicators"] = indicators
        return data

    @inventory_error_handler("create resiloc scenario")
    async def create(self, data: Dict[str, Any]) -> ResilocScenario:
        resiloc_scenario = ResilocScenario(
            name=data.get("name"),
            description=data.get("description") or "",
            visibility=parse_optional_enum(Visibility, data.get("visibility"), "visibility") or Visibility.DRAFT,
            formula=data.get("formula"),
            metadata=CatalogValidationRules.validate_scenario_metadata(data.get("metadata")),
        )
        return await self._repository.create(resiloc_scenario)

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[Dict[str, Any]]:
        page = OffsetPaginationResponse.from_items(await self._repository.find_all(), pagination)
        return replace(page, items=[await self.populate(resiloc_scenario) for resiloc_scenario in page.items])

    @inventory_error_handler("get visible resiloc scenarios")
    async def get_visible(
        self, username: str, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        """Verified templates; drafts are listed for admins only."""
        is_admin = await self._identity.is_admin(username)
        items = [
            resiloc_scenario for resiloc_scenario in await self._repository.find_all()
            if resiloc_scenario.status == TemplateStatus.VERIFIED
            and (is_admin or resiloc_scenario.visibility != Visibility.DRAFT)
        ]
        page = OffsetPaginationResponse.from_items(items, pagination)
        return replace(page, items=[await self.populate(resiloc_scenario) for resiloc_scenario in page.items])

    @inventory_error_handler("get resiloc scenario")
    async def get_resiloc_scenario(self, resiloc_scenario_id: str, username: str) -> Dict[str, Any]:
        resiloc_scenario = await self._require(resiloc_scenario_id)
        is_admin = await self._identity.is_admin(username)
        VisibilityPolicy.ensure_template_readable(
            LABEL, resiloc_scenario.status, resiloc_scenario.visibility, is_admin, False
        )
        return await self.populate(resiloc_scenario)

    @inventory_error_handler("assign resiloc indicators for resiloc scenario")
    async def assign_resiloc_indicators_for_resiloc_scenario(
        self,
        resiloc_scenario_id: str,
        resiloc_indicator_ids: List[str],
        formula: Optional[str] = None,
    ) -> ResilocScenario:
        """Replace the indicator templates of a scenario template.

        Weight rows are created for the proxies of added indicators and
        deleted for the proxies of removed ones.
        """
        resiloc_scenario = await self._require(resiloc_scenario_id)
        ensure_no_duplicates(resiloc_indicator_ids, "resiloc indicator ids")

        wanted = {}
        for resiloc_indicator_id in resiloc_indicator_ids:
            resiloc_indicator = await self._resiloc_indicators.get_by_id(resiloc_indicator_id)
            if resiloc_indicator is None:
                raise NotFoundError(f"Resiloc indicator {resiloc_indicator_id} does not exist")
            VisibilityPolicy.ensure_assignable(
                "resiloc indicator", resiloc_indicator_id, resiloc_indicator.status, resiloc_indicator.visibility
            )
            wanted[resiloc_indicator_id] = resiloc_indicator

        current = list(resiloc_scenario.resiloc_indicator_ids)
        existing = set(current)
        added = [resiloc_indicator_id for resiloc_indicator_id in resiloc_indicator_ids if resiloc_indicator_id not in existing]
        removed = [resiloc_indicator_id for resiloc_indicator_id in current if resiloc_indicator_id not in wanted]

        for resiloc_indicator_id in added:
            for link_id in self._link_ids(resiloc_scenario_id, wanted[resiloc_indicator_id]):
                await self._links.create(ResilocScenarioIndicatorProxy(id=link_id))
        for resiloc_indicator in await self._resiloc_indicators.get_by_ids(removed):
            await self._links.delete_many(self._link_ids(resiloc_scenario_id, resiloc_indicator))

        resiloc_scenario.resiloc_indicator_ids = [
            resiloc_indicator_id for resiloc_indicator_id in current if resiloc_indicator_id in wanted
        ] + added
        if formula is not None:
            resiloc_scenario.formula = formula
        updated = await self._repository.update(resiloc_scenario)
        logger.info(
            f"Resiloc scenario {resiloc_scenario_id}: added {len(added)} and removed {len(removed)} resiloc indicators"
        )
        return updated

    @inventory_error_handler("update resiloc scenario")
    async def update(self, resiloc_scenario_id: str, changes: Dict[str, Any]) -> ResilocScenario:
        resiloc_scenario = await self._require(resiloc_scenario_id)
        if changes.get("name") is not None:
            resiloc_scenario.name = CatalogValidationRules.normalize_name(changes["name"])
        if changes.get("description") is not None:
            resiloc_scenario.description = changes["description"]
        if changes.get("visibility") is not None:
            resiloc_scenario.visibility = parse_enum(Visibility, changes["visibility"], "visibility")
        if changes.get("formula") is not None:
            resiloc_scenario.formula = changes["formula"]
        if changes.get("metadata") is not None:
            resiloc_scenario.metadata = CatalogValidationRules.validate_scenario_metadata(changes["metadata"])
        return await self._repository.update(resiloc_scenario)

    @inventory_error_handler("update resiloc scenario indicator proxy")
    async def update_resiloc_scenario_indicator_proxy(
        self, link_id: str, changes: Dict[str, Any]
    ) -> ResilocScenarioIndicatorProxy:
        link = await self._links.get_by_id(link_id)
        if link is None:
            raise NotFoundError(f"This id {link_id} does not exist")
        if changes.get("relevance") is not None:
            link.relevance = CatalogValidationRules.validate_relevance(changes["relevance"])
        if changes.get("direction") is not None:
            link.direction = CatalogValidationRules.validate_direction(changes["direction"])
        return await self._links.update(link)

    @inventory_error_handler("remove resiloc scenario")
    async def remove(self, resiloc_scenario_id: str) -> bool:
        resiloc_scenario = await self._require(resiloc_scenario_id)
        if await self._communities.is_resiloc_scenario_used(resiloc_scenario_id):
            raise BadRequestError(f"Resiloc scenario {resiloc_scenario_id} is being used by at least one community")

        for resiloc_indicator in await self._resiloc_indicators.get_by_ids(resiloc_scenario.resiloc_indicator_ids):
            await self._links.delete_many(self._link_ids(resiloc_scenario_id, resiloc_indicator))
        deleted = await self._repository.delete(resiloc_scenario_id)
        logger.info(f"Removed resiloc scenario {resiloc_scenario_id}")
        return deleted
