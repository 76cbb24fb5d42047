"""HTTP routers for resiloc scenarios."""

from .v1 import router

__all__ = ["router"]
