"""Protocol interfaces for scenario template persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .resiloc_scenario import ResilocScenario, ResilocScenarioIndicatorProxy


@runtime_checkable
class ResilocScenarioRepository(Protocol):
    """Protocol for scenario template persistence."""

    @abstractmethod
    async def create(self, resiloc_scenario: ResilocScenario) -> ResilocScenario:
        ...

    @abstractmethod
    async def get_by_id(self, resiloc_scenario_id: str) -> Optional[ResilocScenario]:
        ...

    @abstractmethod
    async def get_by_ids(self, resiloc_scenario_ids: List[str]) -> List[ResilocScenario]:
        ...

    @abstractmethod
    async def find_all(self) -> List[ResilocScenario]:
        ...

    @abstractmethod
    async def update(self, resiloc_scenario: ResilocScenario) -> ResilocScenario:
        ...

    @abstractmethod
    async def delete(self, resiloc_scenario_id: str) -> bool:
        ...

    @abstractmethod
    async def exists_with_resiloc_indicator(self, resiloc_indicator_id: str) -> bool:
        """True when any scenario template lists the indicator template."""
        ...


@runtime_checkable
class ResilocScenarioIndicatorProxyRepository(Protocol):
    """Protocol for the weights of scenario templates."""

    @abstractmethod
    async def create(self, link: ResilocScenarioIndicatorProxy) -> ResilocScenarioIndicatorProxy:
        ...

    @abstractmethod
    async def get_by_id(self, link_id: str) -> Optional[ResilocScenarioIndicatorProxy]:
        ...

    @abstractmethod
    async def get_by_ids(self, link_ids: List[str]) -> List[ResilocScenarioIndicatorProxy]:
        ...

    @abstractmethod
    async def update(self, link: ResilocScenarioIndicatorProxy) -> ResilocScenarioIndicatorProxy:
        ...

    @abstractmethod
    async def delete_many(self, link_ids: List[str]) -> int:
        ...
