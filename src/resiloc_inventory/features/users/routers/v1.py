"""User and user-role routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status

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
from ..entities.user import UserRole
from ..models.requests import ChangePasswordRequest, CreateUserRequest, UpdateUserRequest, UserRolesRequest

router = APIRouter(prefix="/users", tags=["Users"])
roles_router = APIRouter(prefix="/user-roles", tags=["User roles"])

role_managers = require_roles(UserRole.COMMUNITY_ADMIN, UserRole.LOCAL_MANAGER)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register an account")
async def create_user(request: CreateUserRequest, container=Depends(get_container)) -> Dict[str, Any]:
    user = await container.users.create(**request.to_changes())
    return {"message": f"Account {user.username} created successfully", "data": user.to_dict()}


@router.get("", summary="List every account (admin only)")
async def list_users(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.users.find_all(pagination))


@router.get("/{username}", summary="Profile of an account")
async def get_user_info(
    username: str,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    user = await container.users.get_user_info(username, caller)
    return user.to_dict()


@router.put("/password/{username}", summary="Change the password of an account")
async def change_password(
    username: str,
    request: ChangePasswordRequest,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    user = await container.users.change_password(username, request.old_password, request.new_password, caller)
    return {"message": f"Password of account {user.username} updated successfully"}


@router.put("/roles/{username}", summary="Grant roles in a community")
async def assign_user_role(
    username: str,
    request: UserRolesRequest,
    flid: Optional[str] = Depends(get_flid),
    caller: str = Depends(role_managers),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community_id = container.identity.resolve_community_id(request.community_id, flid)
    user = await container.users.assign_user_role(username, community_id, request.user_roles, caller, flid)
    return {"message": f"Account {user.username} updated successfully"}


@router.put("/delete/roles/{username}", summary="Revoke roles in a community")
async def remove_user_role(
    username: str,
    request: UserRolesRequest,
    flid: Optional[str] = Depends(get_flid),
    caller: str = Depends(role_managers),
    container=Depends(get_container),
) -> Dict[str, Any]:
    community_id = container.identity.resolve_community_id(request.community_id, flid)
    user = await container.users.remove_user_role(username, community_id, request.user_roles, caller, flid)
    return {"message": f"Account {user.username} updated successfully"}


@router.put("/{username}", summary="Update the profile of an account")
async def update_user(
    username: str,
    request: UpdateUserRequest,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    user = await container.users.update(username, request.to_changes(), caller)
    return {"message": f"Account {user.username} updated successfully", "data": user.to_dict()}


@router.delete("/{username}", summary="Remove an account (admin only)")
async def remove_user(
    username: str,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    await container.users.remove(username)
    return {"message": f"Account {username} removed successfully"}


@roles_router.get("", summary="Every role a user can hold")
async def get_defined_roles(
    _: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[str]:
    return [role.value for role in container.identity.get_defined_roles()]


@roles_router.get("/myself", summary="Roles of the caller in the flid community")
async def get_my_roles(
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[str]:
    return [role.value for role in await container.identity.get_user_roles_by_flid(username, flid)]


@roles_router.get("/{username}", summary="Roles of an account grouped by community (admin only)")
async def get_user_roles(
    username: str,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Any:
    return serialize(await container.users.get_user_roles(username))


@roles_router.get("/{username}/community/{community_id}", summary="Roles of an account in one community")
async def get_user_roles_by_community(
    username: str,
    community_id: str,
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> List[str]:
    roles = await container.identity.get_user_roles_by_community(username, community_id)
    return sorted(role.value for role in roles)
