"""Static proxy request models."""

from typing import Any, Dict, Optional

from ....core.models import RequestModel
from ...catalog.entities.enums import Visibility


class UpdateStaticProxyRequest(RequestModel):
    value: Optional[Any] = None
    min_target: Optional[float] = None
    max_target: Optional[float] = None
    visibility: Optional[Visibility] = None
    metadata: Optional[Dict[str, Any]] = None
