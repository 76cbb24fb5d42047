"""HTTP routers for scenarios."""

from .v1 import router

__all__ = ["router"]
