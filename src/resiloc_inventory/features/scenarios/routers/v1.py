"""Scenario instance routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ....api.dependencies import (
    get_container,
    get_current_username,
    get_flid,
    get_pagination,
    page_response,
    require_admin,
    require_roles,
)
from ...pagination.entities import OffsetPaginationRequest
from ...users.entities.user import UserRole
from ..models.requests import ScenarioProxyWeightsRequest, UpdateScenarioRequest

router = APIRouter(prefix="/scenarios", tags=["Scenarios"])

expert = require_roles(UserRole.LOCAL_MANAGER, UserRole.RESILIENCE_EXPERT)


@router.get("", summary="List every scenario instance (admin only)")
async def list_scenarios(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.scenarios.find_all(pagination))


@router.get("/user/{username}", summary="Scenarios of every community a user follows")
async def get_scenarios_of_user(
    username: str,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[Dict[str, Any]]:
    return await container.scenarios.get_scenarios_of_user(username, caller)


@router.get("/user/detail/{username}", summary="Scenario ids of every community a user follows")
async def get_scenario_ids_of_user(
    username: str,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[Dict[str, Any]]:
    return await container.scenarios.get_scenario_ids_of_user(username, caller)


@router.get("/community/{community_id}")
async def get_scenarios_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.scenarios.get_scenarios_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.get("/onhold/community/{community_id}")
async def get_on_hold_scenarios_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.scenarios.get_on_hold_scenarios_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.get("/submitted/community/{community_id}")
async def get_submitted_scenarios_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.scenarios.get_submitted_scenarios_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.put("/{scenario_id}/scenario-proxy/{link_id}", summary="Change the weights of a proxy in a scenario")
async def update_scenario_indicator_proxy(
    scenario_id: str,
    link_id: str,
    request: ScenarioProxyWeightsRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    link = await container.scenarios.update_scenario_indicator_proxy(
        scenario_id, link_id, request.to_changes(), username, flid
    )
    return {"message": f"Scenario proxy {link_id} updated successfully", "data": link.to_dict()}


@router.get("/{scenario_id}", summary="Get a scenario with its indicators")
async def get_scenario(
    scenario_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return await container.scenarios.get_scenario(scenario_id, username, flid)


@router.put("/{scenario_id}")
async def update_scenario(
    scenario_id: str,
    request: UpdateScenarioRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    scenario = await container.scenarios.update(scenario_id, request.to_changes(), username, flid)
    return {"message": f"Scenario {scenario.id} updated successfully", "data": scenario.to_dict()}
