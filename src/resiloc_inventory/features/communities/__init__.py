"""Communities feature module."""

from .entities import (
    Community,
    CommunityMetadata,
    CommunityRelation,
    CommunityRepository,
    CommunitySetField,
    normalize_community_name,
)
from .repositories import CommunityDatabaseRepository
from .services import CommunityService

__all__ = [
    "Community",
    "CommunityMetadata",
    "CommunityRelation",
    "CommunityRepository",
    "CommunitySetField",
    "normalize_community_name",
    "CommunityDatabaseRepository",
    "CommunityService",
]
