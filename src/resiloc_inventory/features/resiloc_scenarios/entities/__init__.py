"""Scenario template entities."""

from .protocols import ResilocScenarioIndicatorProxyRepository, ResilocScenarioRepository
from .resiloc_scenario import ResilocScenario, ResilocScenarioIndicatorProxy

__all__ = [
    "ResilocScenarioIndicatorProxyRepository",
    "ResilocScenarioRepository",
    "ResilocScenario",
    "ResilocScenarioIndicatorProxy",
]
