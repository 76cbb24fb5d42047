"""Identity services."""

from .identity_service import SELECTED_COMMUNITY, IdentityService

__all__ = ["SELECTED_COMMUNITY", "IdentityService"]
