"""Request models for proxy templates."""

from .requests import CreateResilocProxyRequest, UpdateResilocProxyRequest, UpdateResilocProxyStatusRequest

__all__ = ["CreateResilocProxyRequest", "UpdateResilocProxyRequest", "UpdateResilocProxyStatusRequest"]
