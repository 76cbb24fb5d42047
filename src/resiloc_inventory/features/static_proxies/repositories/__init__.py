"""Static proxy repositories."""

from .static_proxy_repository import StaticProxyDatabaseRepository

__all__ = ["StaticProxyDatabaseRepository"]
