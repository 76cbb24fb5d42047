"""Scenario instance repositories."""

from .scenario_repository import ScenarioDatabaseRepository, ScenarioIndicatorProxyDatabaseRepository

__all__ = ["ScenarioDatabaseRepository", "ScenarioIndicatorProxyDatabaseRepository"]
