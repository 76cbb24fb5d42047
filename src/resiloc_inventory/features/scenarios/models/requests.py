"""Scenario instance request models."""

from typing import Any, Dict, List, Optional

from ....core.models import RequestModel
from ...catalog.entities.enums import Visibility


class UpdateScenarioRequest(RequestModel):
    visibility: Optional[Visibility] = None
    metadata: Optional[List[Dict[str, Any]]] = None


class ScenarioProxyWeightsRequest(RequestModel):
    relevance: Optional[float] = None
    direction: Optional[float] = None
