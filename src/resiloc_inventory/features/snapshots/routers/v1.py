"""Snapshot routes."""

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
)
from ...pagination.entities import OffsetPaginationRequest
from ...users.entities.user import UserRole
from ..models.requests import (
    CreateSnapshotRequest,
    RemoveSnapshotStaticProxiesRequest,
    SnapshotStaticProxiesRequest,
    UpdateSnapshotRequest,
)

router = APIRouter(prefix="/snapshots", tags=["Snapshots"])

manager = require_roles(UserRole.LOCAL_MANAGER)
expert = require_roles(UserRole.LOCAL_MANAGER, UserRole.RESILIENCE_EXPERT)


@router.post("/community/{community_id}", status_code=status.HTTP_201_CREATED, summary="Create a snapshot")
async def create_snapshot(
    community_id: str,
    request: CreateSnapshotRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    snapshot = await container.snapshots.create(community_id, request.to_changes(), username, flid)
    return {"message": f"Snapshot {snapshot.name} created successfully", "data": snapshot.to_dict()}


@router.get("", summary="List every snapshot (admin only)")
async def list_snapshots(
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    _: str = Depends(require_admin),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return page_response(await container.snapshots.find_all(pagination))


@router.get("/user/{username}", summary="Snapshots of every community a user follows")
async def get_snapshots_of_user(
    username: str,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[Dict[str, Any]]:
    return await container.snapshots.get_snapshots_of_user(username, caller)


@router.get("/user/detail/{username}", summary="Snapshot ids of every community a user follows")
async def get_snapshot_ids_of_user(
    username: str,
    caller: str = Depends(get_current_username),
    container=Depends(get_container),
) -> List[Dict[str, Any]]:
    return await container.snapshots.get_snapshot_ids_of_user(username, caller)


@router.get("/community/{community_id}")
async def get_snapshots_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(get_current_username),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.snapshots.get_snapshots_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.get("/onhold/community/{community_id}")
async def get_on_hold_snapshots_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.snapshots.get_on_hold_snapshots_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.get("/submitted/community/{community_id}")
async def get_submitted_snapshots_of_community(
    community_id: str,
    pagination: OffsetPaginationRequest = Depends(get_pagination),
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    page = await container.snapshots.get_submitted_snapshots_of_community(community_id, username, flid, pagination)
    return page_response(page)


@router.put("/static-proxies/{snapshot_id}", summary="Clone community configurations into a snapshot")
async def assign_static_proxies(
    snapshot_id: str,
    request: SnapshotStaticProxiesRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    entries = [entry.to_changes() for entry in request.static_proxies]
    snapshot = await container.snapshots.assign_static_proxies_for_snapshot(snapshot_id, entries, username, flid)
    return {"message": f"Snapshot {snapshot.name} updated successfully", "data": snapshot.to_dict()}


@router.put("/delete/static-proxies/{snapshot_id}", summary="Remove static proxies from a snapshot")
async def remove_static_proxies(
    snapshot_id: str,
    request: RemoveSnapshotStaticProxiesRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    snapshot = await container.snapshots.remove_static_proxies_from_snapshot(
        snapshot_id, request.static_proxy_ids, username, flid
    )
    return {"message": f"Snapshot {snapshot.name} updated successfully", "data": snapshot.to_dict()}


@router.put("/submit/{snapshot_id}", summary="Submit a snapshot")
async def submit_snapshot(
    snapshot_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    snapshot = await container.snapshots.submit_snapshot(snapshot_id, username, flid)
    return {"message": f"Snapshot {snapshot.name} submitted successfully", "data": snapshot.to_dict()}


@router.get("/{snapshot_id}", summary="Get a snapshot with its static proxies")
async def get_snapshot(
    snapshot_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(expert),
    container=Depends(get_container),
) -> Dict[str, Any]:
    return await container.snapshots.get_snapshot(snapshot_id, username, flid)


@router.put("/{snapshot_id}")
async def update_snapshot(
    snapshot_id: str,
    request: UpdateSnapshotRequest,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    snapshot = await container.snapshots.update(snapshot_id, request.to_changes(), username, flid)
    return {"message": f"Snapshot {snapshot.name} updated successfully", "data": snapshot.to_dict()}


@router.delete("/{snapshot_id}")
async def remove_snapshot(
    snapshot_id: str,
    flid: Optional[str] = Depends(get_flid),
    username: str = Depends(manager),
    container=Depends(get_container),
) -> Dict[str, Any]:
    await container.snapshots.remove(snapshot_id, username, flid)
    return {"message": f"Snapshot {snapshot_id} removed successfully"}
