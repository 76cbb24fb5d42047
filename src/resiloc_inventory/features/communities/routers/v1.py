"""Community routes."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Path, status

from ....api.dependencies import (
    get_container,
    get_current_username,
    get_flid,
    get_pagination,
    page_response,
    require_admin,
    require_roles,
    serialize,
)
from ...pagination.entities import OffsetPaginationRequest
from ...users.entities.user import UserRole
from ..models.requests import (
    CommunityPointersRequest,
    CommunityScenariosRequest,
    CommunityStaticProxiesRequest,
    CreateCommunityRequest,
    UpdateCommunityRequest,
    UserOfCommunityRequest,
)

router = APIRouter(
    prefix="/communities",
    tags=["Communities"],
    responses={
        403: {"description": "Caller may not act on this community"},
        404: {"description": "Community not found"},
    },
)

manager = require_roles(UserRole.LOCAL_MANAGER)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a community (admin only)")
async def create_community(
    request: CreateCommunityRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.create(request.to_changes())
    return {"message": f"Community {community.name} created successfully", "data": community.to_dict()}


@router.get("", summary="List every community (admin only)")
async def list_communities(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.communities.find_all(pagination))


@router.get("/follow/{username}", summary="Communities a user may follow")
async def get_communities_to_follow(
    username: str = Path(..., description="Account to list communities for"),
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.communities.get_communities_to_follow(username, caller, pagination))


@router.get("/followed/{username}", summary="Communities a user follows, with roles")
async def get_followed_communities(
    username: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.communities.get_followed_communities(username, caller, pagination))


@router.get("/users/{community_id}", summary="Followers of a community")
async def get_users_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(require_roles(UserRole.LOCAL_MANAGER, UserRole.COMMUNITY_ADMIN)),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.communities.get_users_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.get("/selected-proxies/{community_id}", summary="Proxy templates selected by a community")
async def get_selected_proxies_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.resiloc_proxies.get_selected_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.put("/follow/{community_id}", summary="Follow a community")
async def follow_community(
    community_id: str,
    request: UserOfCommunityRequest,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.assign_user_for_community(community_id, request.username, caller)
    return {"message": f"User {request.username} followed community {community.name} successfully"}


@router.put("/unfollow/{community_id}", summary="Unfollow a community")
async def unfollow_community(
    community_id: str,
    request: UserOfCommunityRequest,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.remove_user_of_community(community_id, request.username, caller)
    return {"message": f"User {request.username} unfollowed community {community.name} successfully"}


@router.put("/static-proxies/{community_id}", summary="Replace the proxy selection of a community")
async def select_static_proxies(
    community_id: str,
    request: CommunityStaticProxiesRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.select_static_proxies_for_community(
        community_id, request.resiloc_proxy_ids, username, flid
    )
    return {"message": f"Community {community.name} updated successfully", "data": community.to_dict()}


@router.put("/scenarios/{community_id}", summary="Replace the scenario selection of a community")
async def select_scenarios(
    community_id: str,
    request: CommunityScenariosRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.select_scenarios_for_community(
        community_id, request.resiloc_scenario_ids, username, flid
    )
    return {"message": f"Community {community.name} updated successfully", "data": community.to_dict()}


@router.put("/pointers/{community_id}", summary="Link a community to others (admin only)")
async def assign_pointers(
    community_id: str,
    request: CommunityPointersRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.assign_pointers(
        community_id, request.parents, request.peers, request.children
    )
    return {"message": f"Community {community.name} updated successfully", "data": community.to_dict()}


@router.put("/delete/pointers/{community_id}", summary="Unlink a community from others (admin only)")
async def remove_pointers(
    community_id: str,
    request: CommunityPointersRequest,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.remove_pointers(
        community_id, request.parents, request.peers, request.children
    )
    return {"message": f"Community {community.name} updated successfully", "data": community.to_dict()}


@router.put("/resume-deletion/{community_id}", summary="Finish an interrupted removal (admin only)")
async def resume_deletion(
    community_id: str,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    await container.communities.resume_deletion(community_id)
    return {"message": f"Community {community_id} removed successfully"}


@router.get("/{community_id}", summary="Get a community")
async def get_community(
    community_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return await container.communities.get_community(community_id, username, flid)


@router.put("/{community_id}", summary="Update a community")
async def update_community(
    community_id: str,
    request: UpdateCommunityRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(require_roles(UserRole.LOCAL_MANAGER, UserRole.COMMUNITY_ADMIN)),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community = await container.communities.update(community_id, request.to_changes(), username, flid)
    return {"message": f"Community {community.name} updated successfully", "data": serialize(community)}


@router.delete("/{community_id}", summary="Remove a community (admin only)")
async def remove_community(
    community_id: str,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    await container.communities.remove(community_id)
    return {"message": f"Community {community_id} removed successfully"}
