"""Indicator template request models."""

from typing import List, Optional

from pydantic import Field

from ....core.models import RequestModel
from ...catalog.entities.enums import (
    IndicatorContext,
    IndicatorCriteria,
    IndicatorDimension,
    TemplateStatus,
    Visibility,
)


class CreateResilocIndicatorRequest(RequestModel):
    name: str = Field(..., min_length=1)
    context: IndicatorContext
    criteria: IndicatorCriteria
    description: str = ""
    dimension: Optional[IndicatorDimension] = None
    tags: List[str] = Field(default_factory=list)
    visibility: Optional[Visibility] = None


class UpdateResilocIndicatorRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    context: Optional[IndicatorContext] = None
    criteria: Optional[IndicatorCriteria] = None
    description: Optional[str] = None
    dimension: Optional[IndicatorDimension] = None
    tags: Optional[List[str]] = None
    visibility: Optional[Visibility] = None


class UpdateResilocIndicatorStatusRequest(RequestModel):
    status: TemplateStatus


class ResilocIndicatorProxiesRequest(RequestModel):
    resiloc_proxy_ids: List[str] = Field(default_factory=list, description="Full desired proxy list")
