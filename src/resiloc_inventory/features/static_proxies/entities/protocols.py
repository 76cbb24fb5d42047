"""Protocol interfaces for static proxy persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ...catalog.entities.enums import Visibility
from .static_proxy import StaticProxy


@runtime_checkable
class StaticProxyRepository(Protocol):
    """Protocol for static proxy persistence."""

    @abstractmethod
    async def create(self, static_proxy: StaticProxy) -> StaticProxy:
        ...

    @abstractmethod
    async def get_by_id(self, static_proxy_id: str) -> Optional[StaticProxy]:
        ...

    @abstractmethod
    async def get_by_ids(self, static_proxy_ids: List[str]) -> List[StaticProxy]:
        """Existing proxies among ``static_proxy_ids``, oldest first."""
        ...

    @abstractmethod
    async def find_all(self) -> List[StaticProxy]:
        ...

    @abstractmethod
    async def find_by_visibility(self, visibility: Visibility) -> List[StaticProxy]:
        ...

    @abstractmethod
    async def update(self, static_proxy: StaticProxy) -> StaticProxy:
        """Persist value, targets, visibility and metadata."""
        ...

    @abstractmethod
    async def delete(self, static_proxy_id: str) -> bool:
        ...

    @abstractmethod
    async def delete_many(self, static_proxy_ids: List[str]) -> int:
        ...
