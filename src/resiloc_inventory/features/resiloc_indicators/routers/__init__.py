"""HTTP routers for resiloc indicators."""

from .v1 import router

__all__ = ["router"]
