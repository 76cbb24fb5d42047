"""Static proxy services."""

from .static_proxy_service import StaticProxiesService

__all__ = ["StaticProxiesService"]
