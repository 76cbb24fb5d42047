"""Static proxies feature module."""

from .entities import StaticProxy, StaticProxyRepository
from .repositories import StaticProxyDatabaseRepository
from .services import StaticProxiesService

__all__ = [
    "StaticProxy",
    "StaticProxyRepository",
    "StaticProxyDatabaseRepository",
    "StaticProxiesService",
]
