"""Request models for snapshots."""

from .requests import (
    CreateSnapshotRequest,
    RemoveSnapshotStaticProxiesRequest,
    SnapshotStaticProxiesRequest,
    SnapshotStaticProxyEntry,
    UpdateSnapshotRequest,
)

__all__ = [
    "CreateSnapshotRequest",
    "RemoveSnapshotStaticProxiesRequest",
    "SnapshotStaticProxiesRequest",
    "SnapshotStaticProxyEntry",
    "UpdateSnapshotRequest",
]
