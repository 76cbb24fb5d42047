"""Community repositories."""

from .community_repository import CommunityDatabaseRepository

__all__ = ["CommunityDatabaseRepository"]
