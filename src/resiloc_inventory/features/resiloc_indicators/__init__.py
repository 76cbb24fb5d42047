"""Indicator templates feature module."""

from .entities import ResilocIndicator, ResilocIndicatorRepository
from .repositories import ResilocIndicatorDatabaseRepository
from .services import ResilocIndicatorService

__all__ = [
    "ResilocIndicator",
    "ResilocIndicatorRepository",
    "ResilocIndicatorDatabaseRepository",
    "ResilocIndicatorService",
]
