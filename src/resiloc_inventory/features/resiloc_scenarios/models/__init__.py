"""Request models for resiloc scenarios."""

from .requests import (
    CreateResilocScenarioRequest,
    IndicatorProxyWeightsRequest,
    ResilocScenarioIndicatorsRequest,
    UpdateResilocScenarioRequest,
)

__all__ = [
    "CreateResilocScenarioRequest",
    "IndicatorProxyWeightsRequest",
    "ResilocScenarioIndicatorsRequest",
    "UpdateResilocScenarioRequest",
]
