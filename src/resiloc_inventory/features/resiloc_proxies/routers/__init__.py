"""HTTP routers for resiloc proxies."""

from .v1 import router

__all__ = ["router"]
