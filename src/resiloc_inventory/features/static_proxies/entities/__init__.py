"""Static proxy entities."""

from .protocols import StaticProxyRepository
from .static_proxy import StaticProxy

__all__ = ["StaticProxyRepository", "StaticProxy"]
