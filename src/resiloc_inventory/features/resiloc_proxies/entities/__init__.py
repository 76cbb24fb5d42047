"""Proxy template entities."""

from .protocols import ResilocProxyRepository
from .resiloc_proxy import ResilocProxy, UnitOfMeasurement

__all__ = ["ResilocProxyRepository", "ResilocProxy", "UnitOfMeasurement"]
