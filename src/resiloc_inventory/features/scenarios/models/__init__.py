"""Request models for scenario instances."""

from .requests import ScenarioProxyWeightsRequest, UpdateScenarioRequest

__all__ = ["ScenarioProxyWeightsRequest", "UpdateScenarioRequest"]
