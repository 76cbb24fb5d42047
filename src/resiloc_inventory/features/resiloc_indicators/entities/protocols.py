"""Protocol interfaces for indicator template persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .resiloc_indicator import ResilocIndicator


@runtime_checkable
class ResilocIndicatorRepository(Protocol):
    """Protocol for indicator template persistence."""

    @abstractmethod
    async def create(self, resiloc_indicator: ResilocIndicator) -> ResilocIndicator:
        ...

    @abstractmethod
    async def get_by_id(self, resiloc_indicator_id: str) -> Optional[ResilocIndicator]:
        ...

    @abstractmethod
    async def get_by_ids(self, resiloc_indicator_ids: List[str]) -> List[ResilocIndicator]:
        ...

    @abstractmethod
    async def find_all(self) -> List[ResilocIndicator]:
        ...

    @abstractmethod
    async def update(self, resiloc_indicator: ResilocIndicator) -> ResilocIndicator:
        """Persist every field, including the proxy id list."""
        ...

    @abstractmethod
    async def delete(self, resiloc_indicator_id: str) -> bool:
        ...

    @abstractmethod
    async def exists_with_resiloc_proxy(self, resiloc_proxy_id: str) -> bool:
        """True when any indicator template lists the proxy template."""
        ...
