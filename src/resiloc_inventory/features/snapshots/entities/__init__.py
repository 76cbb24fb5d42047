"""Snapshot entities."""

from .protocols import SnapshotRepository
from .snapshot import Snapshot

__all__ = ["SnapshotRepository", "Snapshot"]
