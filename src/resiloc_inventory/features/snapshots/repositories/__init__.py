"""Snapshot repositories."""

from .snapshot_repository import SnapshotDatabaseRepository

__all__ = ["SnapshotDatabaseRepository"]
