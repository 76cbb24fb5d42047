"""Proxy template repositories."""

from .resiloc_proxy_repository import ResilocProxyDatabaseRepository

__all__ = ["ResilocProxyDatabaseRepository"]
