"""Snapshot request models."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ....core.models import RequestModel
from ...catalog.entities.enums import SnapshotType, Visibility


class SnapshotStaticProxyEntry(RequestModel):
    """Value of one static proxy inside a snapshot."""

    static_proxy_id: str = Field(..., min_length=1)
    value: Optional[Any] = None
    metadata: Optional[Dict[str, Any]] = None


class CreateSnapshotRequest(RequestModel):
    name: str = Field(..., min_length=1)
    type: SnapshotType
    description: str = ""
    visibility: Optional[Visibility] = None


class UpdateSnapshotRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[SnapshotType] = None
    description: Optional[str] = None
    visibility: Optional[Visibility] = None
    static_proxies: Optional[List[SnapshotStaticProxyEntry]] = None


class SnapshotStaticProxiesRequest(RequestModel):
    static_proxies: List[SnapshotStaticProxyEntry] = Field(default_factory=list)


class RemoveSnapshotStaticProxiesRequest(RequestModel):
    static_proxy_ids: List[str] = Field(default_factory=list)
