"""Indicator template routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ....api.dependencies import (
    get_container,
    get_flid,
    get_pagination,
    get_sort_order,
    page_response,
    require_admin,
    require_roles,
)
from ...pagination.entities import OffsetPaginationRequest, SortOrder
from ...users.entities.user import UserRole
from ..models.requests import (
    CreateResilocIndicatorRequest,
    ResilocIndicatorProxiesRequest,
    UpdateResilocIndicatorRequest,
    UpdateResilocIndicatorStatusRequest,
)

router = APIRouter(prefix="/resiloc-indicators", tags=["Resiloc indicators"])

expert = require_roles(UserRole.LOCAL_MANAGER, UserRole.RESILIENCE_EXPERT)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create or request an indicator template")
async def create_resiloc_indicator(
    request: CreateResilocIndicatorRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_indicator = await container.resiloc_indicators.create(request.to_changes(), username, flid)
    return {
        "message": f"Resiloc indicator {resiloc_indicator.name} created successfully",
        "data": resiloc_indicator.to_dict(),
    }


@router.get("", summary="List every indicator template (admin only)")
async def list_resiloc_indicators(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.find_all(pagination))


@router.get("/visible")
async def get_visible(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.get_visible(pagination))


@router.get("/visible/tag/{tag}")
async def get_visible_by_tag(
    tag: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.get_visible_by_tag(tag, pagination))


@router.get("/verified")
async def get_verified(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.get_verified(username, pagination))


@router.get("/accepted")
async def get_accepted(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.get_accepted(username, pagination))


@router.get("/requested", summary="Templates waiting for review (admin only)")
async def get_requested(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.get_requested(pagination))


@router.get("/community/{community_id}", summary="Templates requested by a community")
async def get_requested_by_community(
    community_id: str,
    statuses: Optional[List[str]] = Query(None, alias="status"),
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.resiloc_indicators.get_requested_by_community(
        community_id, username, flid, statuses, pagination
    )
    return page_response(page)


@router.get("/tag/{tag}", summary="Templates carrying a tag (admin only)")
async def get_by_tag(
    tag: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.get_by_tag(tag, pagination))


@router.get("/tags")
async def get_all_tags(
    order: SortOrder = Depends(get_sort_order),
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_indicators.get_all_tags(username, order, pagination))


@router.get("/{resiloc_indicator_id}")
async def get_resiloc_indicator(
    resiloc_indicator_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_indicator = await container.resiloc_indicators.get_resiloc_indicator(resiloc_indicator_id, username, flid)
    return resiloc_indicator.to_dict()


@router.put("/status/{resiloc_indicator_id}", summary="Review an indicator template (admin only)")
async def update_status(
    resiloc_indicator_id: str,
    request: UpdateResilocIndicatorStatusRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_indicator = await container.resiloc_indicators.update_status(resiloc_indicator_id, request.status)
    return {"message": f"Resiloc indicator {resiloc_indicator.name} updated successfully"}


@router.put("/resiloc-proxies/{resiloc_indicator_id}", summary="Replace the proxies of an indicator template")
async def assign_resiloc_proxies(
    resiloc_indicator_id: str,
    request: ResilocIndicatorProxiesRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_indicator = await container.resiloc_indicators.assign_resiloc_proxies_for_resiloc_indicator(
        resiloc_indicator_id, request.resiloc_proxy_ids, username, flid
    )
    return {
        "message": f"Resiloc indicator {resiloc_indicator.name} updated successfully",
        "data": resiloc_indicator.to_dict(),
    }


@router.put("/{resiloc_indicator_id}")
async def update_resiloc_indicator(
    resiloc_indicator_id: str,
    request: UpdateResilocIndicatorRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_indicator = await container.resiloc_indicators.update(
        resiloc_indicator_id, request.to_changes(), username, flid
    )
    return {
        "message": f"Resiloc indicator {resiloc_indicator.name} updated successfully",
        "data": resiloc_indicator.to_dict(),
    }


@router.delete("/{resiloc_indicator_id}")
async def remove_resiloc_indicator(
    resiloc_indicator_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    await container.resiloc_indicators.remove(resiloc_indicator_id, username, flid)
    return {"message": f"Resiloc indicator {resiloc_indicator_id} removed successfully"}
