"""Community services."""

from .community_service import CommunityService

__all__ = ["CommunityService"]
