"""Proxy template services."""

from .resiloc_proxy_service import ResilocProxyService

__all__ = ["ResilocProxyService"]
