"""Snapshot services."""

from .snapshot_service import SnapshotsService

__all__ = ["SnapshotsService"]
