"""Request models for communities."""

from .requests import (
    CommunityMetadataRequest,
    CommunityPointersRequest,
    CommunityScenariosRequest,
    CommunityStaticProxiesRequest,
    CreateCommunityRequest,
    UpdateCommunityRequest,
    UserOfCommunityRequest,
)

__all__ = [
    "CommunityMetadataRequest",
    "CommunityPointersRequest",
    "CommunityScenariosRequest",
    "CommunityStaticProxiesRequest",
    "CreateCommunityRequest",
    "UpdateCommunityRequest",
    "UserOfCommunityRequest",
]
