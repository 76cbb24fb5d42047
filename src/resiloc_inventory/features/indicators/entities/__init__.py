"""Indicator instance entities."""

from .indicator import Indicator
from .protocols import IndicatorRepository

__all__ = ["Indicator", "IndicatorRepository"]
