"""Indicator instances feature module."""

from .entities import Indicator, IndicatorRepository
from .repositories import IndicatorDatabaseRepository
from .services import IndicatorsService

__all__ = ["Indicator", "IndicatorRepository", "IndicatorDatabaseRepository", "IndicatorsService"]
