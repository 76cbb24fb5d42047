"""Indicator instance services."""

from .indicator_service import IndicatorsService

__all__ = ["IndicatorsService"]
