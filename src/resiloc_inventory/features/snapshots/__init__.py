"""Snapshots feature module."""

from .entities import Snapshot, SnapshotRepository
from .repositories import SnapshotDatabaseRepository
from .services import SnapshotsService

__all__ = ["Snapshot", "SnapshotRepository", "SnapshotDatabaseRepository", "SnapshotsService"]
