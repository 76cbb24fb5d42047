"""Policy services."""

from .policy import (
    APPROVED_STATUSES,
    COMMUNITY_LEVEL_VISIBILITIES,
    PENDING_STATUSES,
    PRIVILEGED_COMMUNITY_ROLES,
    VisibilityPolicy,
)

__all__ = [
    "APPROVED_STATUSES",
    "COMMUNITY_LEVEL_VISIBILITIES",
    "PENDING_STATUSES",
    "PRIVILEGED_COMMUNITY_ROLES",
    "VisibilityPolicy",
]
