"""Proxy templates feature module."""

from .entities import ResilocProxy, ResilocProxyRepository, UnitOfMeasurement
from .repositories import ResilocProxyDatabaseRepository
from .services import ResilocProxyService

__all__ = [
    "ResilocProxy",
    "ResilocProxyRepository",
    "UnitOfMeasurement",
    "ResilocProxyDatabaseRepository",
    "ResilocProxyService",
]
