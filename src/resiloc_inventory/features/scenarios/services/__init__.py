"""Scenario instance services."""

from .scenario_service import ScenariosService

__all__ = ["ScenariosService"]
