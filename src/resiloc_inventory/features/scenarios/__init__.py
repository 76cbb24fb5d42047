"""Scenario instances feature module."""

from .entities import Scenario, ScenarioIndicatorProxy, ScenarioIndicatorProxyRepository, ScenarioRepository
from .repositories import ScenarioDatabaseRepository, ScenarioIndicatorProxyDatabaseRepository
from .services import ScenariosService

__all__ = [
    "Scenario",
    "ScenarioIndicatorProxy",
    "ScenarioIndicatorProxyRepository",
    "ScenarioRepository",
    "ScenarioDatabaseRepository",
    "ScenarioIndicatorProxyDatabaseRepository",
    "ScenariosService",
]
