"""Scenario instance entities."""

from .protocols import ScenarioIndicatorProxyRepository, ScenarioRepository
from .scenario import Scenario, ScenarioIndicatorProxy

__all__ = ["ScenarioIndicatorProxyRepository", "ScenarioRepository", "Scenario", "ScenarioIndicatorProxy"]
