"""Proxy template routes."""

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
    CreateResilocProxyRequest,
    UpdateResilocProxyRequest,
    UpdateResilocProxyStatusRequest,
)

router = APIRouter(prefix="/resiloc-proxies", tags=["Resiloc proxies"])

manager = require_roles(UserRole.LOCAL_MANAGER)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create or request a proxy template")
async def create_resiloc_proxy(
    request: CreateResilocProxyRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_proxy = await container.resiloc_proxies.create(request.to_changes(), username, flid)
    return {"message": f"Resiloc proxy {resiloc_proxy.name} created successfully", "data": resiloc_proxy.to_dict()}


@router.get("", summary="List every proxy template (admin only)")
async def list_resiloc_proxies(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_proxies.find_all(pagination))


@router.get("/visible", summary="Templates visible to every community")
async def get_visible(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_proxies.get_visible(pagination))


@router.get("/visible/tag/{tag}", summary="Visible templates carrying a tag")
async def get_visible_by_tag(
    tag: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_proxies.get_visible_by_tag(tag, pagination))


@router.get("/verified", summary="Verified templates")
async def get_verified(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_proxies.get_verified(username, pagination))


@router.get("/accepted", summary="Accepted templates")
async def get_accepted(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_proxies.get_accepted(username, pagination))


@router.get("/requested", summary="Templates waiting for review (admin only)")
async def get_requested(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_proxies.get_requested(pagination))


@router.get("/community/{community_id}", summary="Templates requested by a community")
async def get_requested_by_community(
    community_id: str,
    statuses: Optional[List[str]] = Query(None, alias="status"),
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.resiloc_proxies.get_requested_by_community(
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
    return page_response(await container.resiloc_proxies.get_by_tag(tag, pagination))


@router.get("/tags", summary="Every tag in use")
async def get_all_tags(
    order: SortOrder = Depends(get_sort_order),
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.resiloc_proxies.get_all_tags(username, order, pagination))


@router.get("/{resiloc_proxy_id}", summary="Get a proxy template")
async def get_resiloc_proxy(
    resiloc_proxy_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_proxy = await container.resiloc_proxies.get_resiloc_proxy(resiloc_proxy_id, username, flid)
    return resiloc_proxy.to_dict()


@router.put("/status/{resiloc_proxy_id}", summary="Review a proxy template (admin only)")
async def update_status(
    resiloc_proxy_id: str,
    request: UpdateResilocProxyStatusRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_proxy = await container.resiloc_proxies.update_status(resiloc_proxy_id, request.status)
    return {"message": f"Resiloc proxy {resiloc_proxy.name} updated successfully"}


@router.put("/{resiloc_proxy_id}", summary="Update a proxy template")
async def update_resiloc_proxy(
    resiloc_proxy_id: str,
    request: UpdateResilocProxyRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    resiloc_proxy = await container.resiloc_proxies.update(resiloc_proxy_id, request.to_changes(), username, flid)
    return {"message": f"Resiloc proxy {resiloc_proxy.name} updated successfully", "data": resiloc_proxy.to_dict()}


@router.delete("/{resiloc_proxy_id}", summary="Remove a proxy template")
async def remove_resiloc_proxy(
    resiloc_proxy_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    await container.resiloc_proxies.remove(resiloc_proxy_id, username, flid)
    return {"message": f"Resiloc proxy {resiloc_proxy_id} removed successfully"}
