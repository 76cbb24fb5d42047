"""Protocol interfaces for indicator instance persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .indicator import Indicator


@runtime_checkable
class IndicatorRepository(Protocol):
    """Protocol for indicator instance persistence."""

    @abstractmethod
    async def create(self, indicator: Indicator) -> Indicator:
        ...

    @abstractmethod
    async def get_by_id(self, indicator_id: str) -> Optional[Indicator]:
        ...

    @abstractmethod
    async def get_by_ids(self, indicator_ids: List[str]) -> List[Indicator]:
        ...

    @abstractmethod
    async def delete(self, indicator_id: str) -> bool:
        ...

    @abstractmethod
    async def exists_for_resiloc_indicator(self, resiloc_indicator_id: str) -> bool:
        """True when any instance of the indicator template exists."""
        ...
