"""Protocol interfaces for proxy template persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .resiloc_proxy import ResilocProxy


@runtime_checkable
class ResilocProxyRepository(Protocol):
    """Protocol for proxy template persistence."""

    @abstractmethod
    async def create(self, resiloc_proxy: ResilocProxy) -> ResilocProxy:
        """Persist a template; raises UniqueConstraintError on a taken name."""
        ...

    @abstractmethod
    async def get_by_id(self, resiloc_proxy_id: str) -> Optional[ResilocProxy]:
        ...

    @abstractmethod
    async def get_by_ids(self, resiloc_proxy_ids: List[str]) -> List[ResilocProxy]:
        ...

    @abstractmethod
    async def find_all(self) -> List[ResilocProxy]:
        ...

    @abstractmethod
    async def update(self, resiloc_proxy: ResilocProxy) -> ResilocProxy:
        ...

    @abstractmethod
    async def delete(self, resiloc_proxy_id: str) -> bool:
        ...
