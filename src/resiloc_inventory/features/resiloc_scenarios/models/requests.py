"""Scenario template request models."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ....core.models import RequestModel
from ...catalog.entities.enums import Visibility


class CreateResilocScenarioRequest(RequestModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    visibility: Optional[Visibility] = None
    formula: Optional[str] = None
    metadata: List[Dict[str, Any]] = Field(
        default_factory=list, description="Entries of name, type (text or number), value and mandatory"
    )


class UpdateResilocScenarioRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    visibility: Optional[Visibility] = None
    formula: Optional[str] = None
    metadata: Optional[List[Dict[str, Any]]] = None


class ResilocScenarioIndicatorsRequest(RequestModel):
    resiloc_indicator_ids: List[str] = Field(default_factory=list, description="Full desired indicator list")
    formula: Optional[str] = None


class IndicatorProxyWeightsRequest(RequestModel):
    """Weights of one proxy inside a scenario."""

    relevance: Optional[float] = None
    direction: Optional[float] = None
