"""Static proxy routes."""

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
from ..models.requests import UpdateStaticProxyRequest

router = APIRouter(prefix="/static-proxies", tags=["Static proxies"])

manager = require_roles(UserRole.LOCAL_MANAGER)
expert = require_roles(UserRole.LOCAL_MANAGER, UserRole.RESILIENCE_EXPERT)


@router.get("", summary="List every static proxy (admin only)")
async def list_static_proxies(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.static_proxies.find_all(pagination))


@router.get("/public", summary="Static proxies with public visibility")
async def get_public_static_proxies(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.static_proxies.find_public(pagination))


@router.get("/user/{username}", summary="Community configurations of every community a user follows")
async def get_static_proxies_of_user(
    username: str,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[Dict[str, Any]]:
    return await container.static_proxies.get_static_proxies_of_user(username, caller)


@router.get("/user/detail/{username}")
async def get_static_proxy_ids_of_user(
    username: str,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[Dict[str, Any]]:
    return await container.static_proxies.get_static_proxy_ids_of_user(username, caller)


@router.get("/community/{community_id}", summary="Community configurations of a community")
async def get_static_proxies_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.static_proxies.get_static_proxies_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.get("/snapshot/{snapshot_id}", summary="Static proxies of a snapshot")
async def get_static_proxies_of_snapshot(
    snapshot_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.static_proxies.get_static_proxies_of_snapshot(snapshot_id, username, flid, pagination)
    return page_response(page)


@router.put("/metadata/{static_proxy_id}", summary="Update a community configuration")
async def update_static_proxy_of_community(
    static_proxy_id: str,
    request: UpdateStaticProxyRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    static_proxy = await container.static_proxies.update_static_proxy_of_community(
        static_proxy_id, request.to_changes(), username, flid
    )
    return {"message": f"Static proxy {static_proxy.id} updated successfully", "data": static_proxy.to_dict()}


@router.put("/snapshot/{static_proxy_id}", summary="Update the values of a snapshot's static proxy")
async def update_static_proxy_of_snapshot(
    static_proxy_id: str,
    request: UpdateStaticProxyRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    static_proxy = await container.static_proxies.update_static_proxy_of_snapshot(
        static_proxy_id, request.to_changes(), username, flid
    )
    return {"message": f"Static proxy {static_proxy.id} updated successfully", "data": static_proxy.to_dict()}


@router.get("/{static_proxy_id}", summary="Get a static proxy")
async def get_static_proxy(
    static_proxy_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    static_proxy = await container.static_proxies.get_static_proxy(static_proxy_id, username, flid)
    return static_proxy.to_dict()
