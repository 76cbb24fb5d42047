"""Request models for indicator templates."""

from .requests import (
    CreateResilocIndicatorRequest,
    ResilocIndicatorProxiesRequest,
    UpdateResilocIndicatorRequest,
    UpdateResilocIndicatorStatusRequest,
)

__all__ = [
    "CreateResilocIndicatorRequest",
    "ResilocIndicatorProxiesRequest",
    "UpdateResilocIndicatorRequest",
    "UpdateResilocIndicatorStatusRequest",
]
