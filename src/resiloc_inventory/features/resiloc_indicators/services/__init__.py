"""Indicator template services."""

from .resiloc_indicator_service import ResilocIndicatorService

__all__ = ["ResilocIndicatorService"]
