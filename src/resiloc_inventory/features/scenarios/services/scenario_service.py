"""Scenario instance service.

A scenario instance copies the template's metadata, instantiates every
indicator template of it and re-keys the template weights over the new
instance ids.
"""

import copy
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import ForbiddenError, NotFoundError
from ....utils.enums import parse_enum
from ....utils.uuid import composite_id
from ...catalog.entities.enums import SubmissionStatus, Visibility
from ...catalog.utils.validation import CatalogValidationRules
from ...communities.entities.protocols import CommunityRepository
from ...identity.services.identity_service import IdentityService
from ...indicators.entities.indicator import Indicator
from ...pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse
from ...policy.services.policy import VisibilityPolicy
from ...resiloc_scenarios.entities.protocols import (
    ResilocScenarioIndicatorProxyRepository,
    ResilocScenarioRepository,
)
from ..entities.protocols import ScenarioIndicatorProxyRepository, ScenarioRepository
from ..entities.scenario import Scenario, ScenarioIndicatorProxy

if TYPE_CHECKING:
    from ...indicators.services.indicator_service import IndicatorsService
    from ...static_proxies.services.static_proxy_service import StaticProxiesService

logger = logging.getLogger(__name__)

LABEL = "scenario"
LINK_ATTRIBUTE = "scenarioIndicatorProxy"


def _visibility_of(record: Any) -> Visibility:
    return record.visibility


class ScenariosService:
    """Service for scenario instances."""

    def __init__(
        self,
        repository: ScenarioRepository,
        link_repository: ScenarioIndicatorProxyRepository,
        resiloc_scenario_repository: ResilocScenarioRepository,
        resiloc_scenario_link_repository: ResilocScenarioIndicatorProxyRepository,
        indicators: "IndicatorsService",
        static_proxies: "StaticProxiesService",
        community_repository: CommunityRepository,
        identity: IdentityService,
    ):
        self._repository = repository
        self._links = link_repository
        self._resiloc_scenarios = resiloc_scenario_repository
        self._resiloc_scenario_links = resiloc_scenario_link_repository
        self._indicators = indicators
        self._static_proxies = static_proxies
        self._communities = community_repository
        self._identity = identity

    async def _require(self, scenario_id: str) -> Scenario:
        scenario = await self._repository.get_by_id(scenario_id)
        if scenario is None:
            raise NotFoundError(f"Scenario {scenario_id} does not exist")
        return scenario

    async def _ensure_manager(self, community_id: Optional[str], username: str, flid: Optional[str]) -> None:
        if await self._identity.is_admin(username):
            return
        if self._identity.is_community_id_matching_with_flid(community_id, flid):
            return
        raise ForbiddenError()

    @staticmethod
    def _link_ids(scenario_id: str, indicator: Indicator) -> List[str]:
        return [composite_id(scenario_id, indicator.id, static_proxy_id) for static_proxy_id in indicator.static_proxy_ids]

    async def _populate(self, scenario: Scenario) -> Dict[str, Any]:
        data = scenario.to_dict()
        indicators = []
        for indicator in await self._indicators.get_by_ids(scenario.indicator_ids):
            links = {link.id: link for link in await self._links.get_by_ids(self._link_ids(scenario.id, indicator))}
            static_proxies = []
            for static_proxy in await self._static_proxies.get_by_ids(indicator.static_proxy_ids):
                view = static_proxy.to_dict()
                link = links.get(composite_id(scenario.id, indicator.id, static_proxy.id))
                view[LINK_ATTRIBUTE] = link.to_dict() if link else None
                static_proxies.append(view)
            view = indicator.to_dict()
            view["staticProxies"] = static_proxies
            indicators.append(view)
        data["indicators"] = indicators
        return data

    @inventory_error_handler("create scenario")
    async def create(self, resiloc_scenario_id: str) -> Scenario:
        """Instantiate a scenario template.

        Weights are copied from the template rows of the same
        (indicator, proxy) pair; missing template rows give zero weights.
        """
        resiloc_scenario = await self._resiloc_scenarios.get_by_id(resiloc_scenario_id)
        if resiloc_scenario is None:
            raise NotFoundError(f"Resiloc scenario {resiloc_scenario_id} does not exist")

        indicators = [
            await self._indicators.create(resiloc_indicator_id)
            for resiloc_indicator_id in resiloc_scenario.resiloc_indicator_ids
        ]
        scenario = await self._repository.create(Scenario(
            resiloc_scenario_id=resiloc_scenario.id,
            metadata=copy.deepcopy(resiloc_scenario.metadata),
            indicator_ids=[indicator.id for indicator in indicators],
        ))

        for indicator in indicators:
            for static_proxy in await self._static_proxies.get_by_ids(indicator.static_proxy_ids):
                template_link = await self._resiloc_scenario_links.get_by_id(composite_id(
                    resiloc_scenario.id, indicator.resiloc_indicator_id, static_proxy.resiloc_proxy_id
                ))
                await self._links.create(ScenarioIndicatorProxy(
                    id=composite_id(scenario.id, indicator.id, static_proxy.id),
                    relevance=template_link.relevance if template_link else 0.0,
                    direction=template_link.direction if template_link else 0.0,
                ))
        logger.info(
            f"Created scenario {scenario.id} from resiloc scenario {resiloc_scenario_id} "
            f"with {len(indicators)} indicators"
        )
        return scenario

    async def find_all(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[Dict[str, Any]]:
        page = OffsetPaginationResponse.from_items(await self._repository.find_all(), pagination)
        return replace(page, items=[await self._populate(scenario) for scenario in page.items])

    @inventory_error_handler("get scenario")
    async def get_scenario(self, scenario_id: str, username: str, flid: Optional[str] = None) -> Dict[str, Any]:
        scenario = await self._require(scenario_id)
        is_admin = await self._identity.is_admin(username)
        is_owner = not is_admin and self._identity.is_community_id_matching_with_flid(
            await self._communities.find_id_by_scenario(scenario_id), flid
        )
        VisibilityPolicy.ensure_template_readable(LABEL, None, scenario.visibility, is_admin, is_owner)
        return await self._populate(scenario)

    async def _grouped_by_followed_community(self, username: str, caller: str) -> List[Dict[str, Any]]:
        if not await self._identity.is_self_or_admin(username, caller):
            raise ForbiddenError()
        user = await self._identity.require_user(username)

        groups = []
        for community in await self._communities.find_followed_by(user.id):
            scenarios = await self._repository.get_by_ids(list(community.scenarios.values()))
            visible = VisibilityPolicy.filter_community_level(
                scenarios, _visibility_of, False, user.roles_in(community.id)
            )
            groups.append({"id": community.id, "name": community.name, "scenarios": visible})
        return groups

    @inventory_error_handler("get scenarios of user")
    async def get_scenarios_of_user(self, username: str, caller: str) -> List[Dict[str, Any]]:
        groups = await self._grouped_by_followed_community(username, caller)
        for group in groups:
            group["scenarios"] = [await self._populate(scenario) for scenario in group["scenarios"]]
        return groups

    @inventory_error_handler("get scenario ids of user")
    async def get_scenario_ids_of_user(self, username: str, caller: str) -> List[Dict[str, Any]]:
        groups = await self._grouped_by_followed_community(username, caller)
        return [
            {
                "id": group["id"],
                "name": group["name"],
                "scenarioIds": [scenario.id for scenario in group["scenarios"]],
            }
            for group in groups
        ]

    async def _scenarios_of_community(self, community_id: str, username: str, flid: Optional[str]):
        community_id = self._identity.resolve_community_id(community_id, flid)
        await self._ensure_manager(community_id, username, flid)
        community = await self._communities.get_by_id(community_id)
        if community is None:
            raise NotFoundError(f"Community id {community_id} does not exist")
        return community_id, await self._repository.get_by_ids(list(community.scenarios.values()))

    @inventory_error_handler("get scenarios of community")
    async def get_scenarios_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        community_id, scenarios = await self._scenarios_of_community(community_id, username, flid)
        is_admin = await self._identity.is_admin(username)
        roles = await self._identity.get_user_roles_by_community(username, community_id)
        visible = VisibilityPolicy.filter_community_level(scenarios, _visibility_of, is_admin, roles)
        page = OffsetPaginationResponse.from_items(visible, pagination)
        return replace(page, items=[await self._populate(scenario) for scenario in page.items])

    async def _with_status(
        self,
        status: SubmissionStatus,
        community_id: str,
        username: str,
        flid: Optional[str],
        pagination: Optional[OffsetPaginationRequest],
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        _, scenarios = await self._scenarios_of_community(community_id, username, flid)
        page = OffsetPaginationResponse.from_items(
            [scenario for scenario in scenarios if scenario.status == status], pagination
        )
        return replace(page, items=[await self._populate(scenario) for scenario in page.items])

    @inventory_error_handler("get on hold scenarios of community")
    async def get_on_hold_scenarios_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        return await self._with_status(SubmissionStatus.ON_HOLD, community_id, username, flid, pagination)

    @inventory_error_handler("get submitted scenarios of community")
    async def get_submitted_scenarios_of_community(
        self,
        community_id: str,
        username: str,
        flid: Optional[str] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Dict[str, Any]]:
        return await self._with_status(SubmissionStatus.SUBMITTED, community_id, username, flid, pagination)

    @inventory_error_handler("update scenario")
    async def update(
        self,
        scenario_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> Scenario:
        """Edit visibility and metadata of an instance owned by the caller's community."""
        scenario = await self._require(scenario_id)
        await self._ensure_manager(await self._communities.find_id_by_scenario(scenario_id), username, flid)

        if changes.get("visibility") is not None:
            scenario.visibility = parse_enum(Visibility, changes["visibility"], "visibility")
        if changes.get("metadata") is not None:
            scenario.metadata = CatalogValidationRules.validate_scenario_metadata(changes["metadata"])
        updated = await self._repository.update(scenario)
        logger.info(f"Updated scenario {scenario_id}")
        return updated

    @inventory_error_handler("update scenario indicator proxy")
    async def update_scenario_indicator_proxy(
        self,
        scenario_id: str,
        link_id: str,
        changes: Dict[str, Any],
        username: str,
        flid: Optional[str] = None,
    ) -> ScenarioIndicatorProxy:
        """Change the weights of one static proxy of an instance."""
        await self._require(scenario_id)
        await self._ensure_manager(await self._communities.find_id_by_scenario(scenario_id), username, flid)

        link = await self._links.get_by_id(link_id)
        if link is None or not link_id.startswith(f"{scenario_id.split('-')[0]}-"):
            raise NotFoundError(f"This id {link_id} does not exist")
        if changes.get("relevance") is not None:
            link.relevance = CatalogValidationRules.validate_relevance(changes["relevance"])
        if changes.get("direction") is not None:
            link.direction = CatalogValidationRules.validate_direction(changes["direction"])
        return await self._links.update(link)

    @inventory_error_handler("remove scenario")
    async def remove(self, scenario_id: str) -> bool:
        """Delete depth-first: weights, indicators with their static proxies, then the instance."""
        scenario = await self._require(scenario_id)
        for indicator in await self._indicators.get_by_ids(scenario.indicator_ids):
            await self._links.delete_many(self._link_ids(scenario_id, indicator))
            await self._indicators.remove(indicator.id)
        deleted = await self._repository.delete(scenario_id)
        logger.info(f"Removed scenario {scenario_id} with {len(scenario.indicator_ids)} indicators")
        return deleted

    async def get_by_ids(self, scenario_ids: List[str]) -> List[Scenario]:
        return await self._repository.get_by_ids(list(scenario_ids))

