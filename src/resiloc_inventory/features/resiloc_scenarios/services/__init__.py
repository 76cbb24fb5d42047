"""Scenario template services."""

from .resiloc_scenario_service import ResilocScenarioService

__all__ = ["ResilocScenarioService"]
