"""Scenario template repositories."""

from .resiloc_scenario_repository import (
    ResilocScenarioDatabaseRepository,
    ResilocScenarioIndicatorProxyDatabaseRepository,
)

__all__ = ["ResilocScenarioDatabaseRepository", "ResilocScenarioIndicatorProxyDatabaseRepository"]
