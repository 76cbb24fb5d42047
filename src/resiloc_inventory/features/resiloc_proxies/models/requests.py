"""Proxy template request models."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ....core.models import RequestModel
from ...catalog.entities.enums import TemplateStatus, Visibility


class CreateResilocProxyRequest(RequestModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    visibility: Optional[Visibility] = None
    unit_of_measurement: List[Dict[str, Any]] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(..., description="The eight metadata fields keyed by wire name")


class UpdateResilocProxyRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    type: Optional[str] = None
    tags: Optional[List[str]] = None
    visibility: Optional[Visibility] = None
    unit_of_measurement: Optional[List[Dict[str, Any]]] = None
    metadata: Optional[Dict[str, Any]] = None


class UpdateResilocProxyStatusRequest(RequestModel):
    status: TemplateStatus
