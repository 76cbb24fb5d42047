"""Community entities."""

from .community import (
    Community,
    CommunityMetadata,
    CommunityRelation,
    CommunitySetField,
    EdgeOperation,
    normalize_community_name,
)
from .protocols import CommunityRepository

__all__ = [
    "Community",
    "CommunityMetadata",
    "CommunityRelation",
    "CommunitySetField",
    "EdgeOperation",
    "normalize_community_name",
    "CommunityRepository",
]
