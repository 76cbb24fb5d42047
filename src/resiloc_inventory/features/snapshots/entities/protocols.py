"""Protocol interfaces for snapshot persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .snapshot import Snapshot


@runtime_checkable
class SnapshotRepository(Protocol):
    """Protocol for snapshot persistence."""

    @abstractmethod
    async def create(self, snapshot: Snapshot) -> Snapshot:
        ...

    @abstractmethod
    async def get_by_id(self, snapshot_id: str) -> Optional[Snapshot]:
        ...

    @abstractmethod
    async def get_by_ids(self, snapshot_ids: List[str]) -> List[Snapshot]:
        ...

    @abstractmethod
    async def update(self, snapshot: Snapshot) -> Snapshot:
        """Persist every field, including the static proxy id list."""
        ...

    @abstractmethod
    async def delete(self, snapshot_id: str) -> bool:
        ...

    @abstractmethod
    async def find_by_static_proxy(self, static_proxy_id: str) -> Optional[Snapshot]:
        ...
