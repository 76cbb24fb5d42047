"""HTTP routers for users and their roles."""

from .v1 import roles_router, router

__all__ = ["router", "roles_router"]
