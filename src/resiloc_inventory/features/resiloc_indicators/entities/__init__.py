"""Indicator template entities."""

from .protocols import ResilocIndicatorRepository
from .resiloc_indicator import ResilocIndicator

__all__ = ["ResilocIndicatorRepository", "ResilocIndicator"]
