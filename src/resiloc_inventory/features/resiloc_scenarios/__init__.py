"""Scenario templates feature module."""

from .entities import (
    ResilocScenario,
    ResilocScenarioIndicatorProxy,
    ResilocScenarioIndicatorProxyRepository,
    ResilocScenarioRepository,
)
from .repositories import ResilocScenarioDatabaseRepository, ResilocScenarioIndicatorProxyDatabaseRepository
from .services import ResilocScenarioService

__all__ = [
    "ResilocScenario",
    "ResilocScenarioIndicatorProxy",
    "ResilocScenarioIndicatorProxyRepository",
    "ResilocScenarioRepository",
    "ResilocScenarioDatabaseRepository",
    "ResilocScenarioIndicatorProxyDatabaseRepository",
    "ResilocScenarioService",
]
