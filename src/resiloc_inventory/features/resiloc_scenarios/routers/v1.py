"""Scenario template routes."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ....api.dependencies import get_container, get_pagination, page_response, require_admin, require_roles
from ...pagination.entities import OffsetPaginationRequest
from ...users.entities.user import UserRole
from ..models.requests import (
    CreateResilocScenarioRequest,
    IndicatorProxyWeightsRequest,
    ResilocScenarioIndicatorsRequest,
    UpdateResilocScenarioRequest,
)

router = APIRouter(prefix="/resiloc-scenarios", tags=["Resiloc scenarios"])

expert = require_roles(UserRole.LOCAL_MANAGER, UserRole.RESILIENCE_EXPERT)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a scenario template (admin only)")
async def create_resiloc_scenario(
    request: CreateResilocScenarioRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_scenario = await container.resiloc_scenarios.create(request.to_changes())
    return {
        "message": f"Resiloc scenario {resiloc_scenario.name} created successfully",
        "data": resiloc_scenario.to_dict(),
    }


@router.get("", summary="List every scenario template (admin only)")
async def list_resiloc_scenarios(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_scenarios.find_all(pagination))


@router.get("/visible", summary="Verified scenario templates")
async def get_visible(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_scenarios.get_visible(username, pagination))


@router.put("/resiloc-indicators/{resiloc_scenario_id}", summary="Replace the indicators of a scenario template")
async def assign_resiloc_indicators(
    resiloc_scenario_id: str,
    request: ResilocScenarioIndicatorsRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_scenario = await container.resiloc_scenarios.assign_resiloc_indicators_for_resiloc_scenario(
        resiloc_scenario_id, request.resiloc_indicator_ids, request.formula
    )
    return {
        "message": f"Resiloc scenario {resiloc_scenario.name} updated successfully",
        "data": resiloc_scenario.to_dict(),
    }


@router.put("/scenario-proxy/{link_id}", summary="Change the weights of a proxy in a scenario template")
async def update_resiloc_scenario_indicator_proxy(
    link_id: str,
    request: IndicatorProxyWeightsRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    link = await container.resiloc_scenarios.update_resiloc_scenario_indicator_proxy(link_id, request.to_changes())
    return {"message": f"Resiloc scenario proxy {link_id} updated successfully", "data": link.to_dict()}


@router.get("/{resiloc_scenario_id}", summary="Get a scenario template with its indicators and proxies")
async def get_resiloc_scenario(
    resiloc_scenario_id: str,
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return await container.resiloc_scenarios.get_resiloc_scenario(resiloc_scenario_id, username)


@router.put("/{resiloc_scenario_id}", summary="Update a scenario template (admin only)")
async def update_resiloc_scenario(
    resiloc_scenario_id: str,
    request: UpdateResilocScenarioRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_scenario = await container.resiloc_scenarios.update(resiloc_scenario_id, request.to_changes())
    return {
        "message": f"Resiloc scenario {resiloc_scenario.name} updated successfully",
        "data": resiloc_scenario.to_dict(),
    }


@router.delete("/{resiloc_scenario_id}", summary="Remove a scenario template (admin only)")
async def remove_resiloc_scenario(
    resiloc_scenario_id: str,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    await container.resiloc_scenarios.remove(resiloc_scenario_id)
    return {"message": f"Resiloc scenario {resiloc_scenario_id} removed successfully"}
