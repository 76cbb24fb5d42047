"""Protocol interfaces for scenario instance persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .scenario import Scenario, ScenarioIndicatorProxy


@runtime_checkable
class ScenarioRepository(Protocol):
    """Protocol for scenario instance persistence."""

    @abstractmethod
    async def create(self, scenario: Scenario) -> Scenario:
        ...

    @abstractmethod
    async def get_by_id(self, scenario_id: str) -> Optional[Scenario]:
        ...

    @abstractmethod
    async def get_by_ids(self, scenario_ids: List[str]) -> List[Scenario]:
        ...

    @abstractmethod
    async def find_all(self) -> List[Scenario]:
        ...

    @abstractmethod
    async def update(self, scenario: Scenario) -> Scenario:
        ...

    @abstractmethod
    async def delete(self, scenario_id: str) -> bool:
        ...


@runtime_checkable
class ScenarioIndicatorProxyRepository(Protocol):
    """Protocol for the weights of scenario instances."""

    @abstractmethod
    async def create(self, link: ScenarioIndicatorProxy) -> ScenarioIndicatorProxy:
        ...

    @abstractmethod
    async def get_by_id(self, link_id: str) -> Optional[ScenarioIndicatorProxy]:
        ...

    @abstractmethod
    async def get_by_ids(self, link_ids: List[str]) -> List[ScenarioIndicatorProxy]:
        ...

    @abstractmethod
    async def update(self, link: ScenarioIndicatorProxy) -> ScenarioIndicatorProxy:
        ...

    @abstractmethod
    async def delete_many(self, link_ids: List[str]) -> int:
        ...
