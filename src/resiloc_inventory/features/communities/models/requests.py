"""Community request models."""

from typing import List, Optional

from pydantic import Field

from ....core.models import RequestModel
from ...catalog.entities.enums import Visibility


class CommunityMetadataRequest(RequestModel):
    description: Optional[str] = Field(None, description="Free text description")
    geometry: Optional[str] = Field(None, description="GeoJSON outline of the community")


class CreateCommunityRequest(RequestModel):
    name: str = Field(..., min_length=1, description="Unique community name")
    visibility: Optional[Visibility] = Field(None, description="Defaults to draft")
    metadata: Optional[CommunityMetadataRequest] = None


class UpdateCommunityRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    visibility: Optional[Visibility] = None
    metadata: Optional[CommunityMetadataRequest] = None


class UserOfCommunityRequest(RequestModel):
    username: str = Field(..., min_length=1, description="Account that follows or unfollows")


class CommunityStaticProxiesRequest(RequestModel):
    resiloc_proxy_ids: List[str] = Field(default_factory=list, description="Full desired proxy selection")


class CommunityScenariosRequest(RequestModel):
    resiloc_scenario_ids: List[str] = Field(default_factory=list, description="Full desired scenario selection")


class CommunityPointersRequest(RequestModel):
    parents: List[str] = Field(default_factory=list)
    peers: List[str] = Field(default_factory=list)
    children: List[str] = Field(default_factory=list)
