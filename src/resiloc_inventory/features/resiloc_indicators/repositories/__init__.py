"""Indicator template repositories."""

from .resiloc_indicator_repository import ResilocIndicatorDatabaseRepository

__all__ = ["ResilocIndicatorDatabaseRepository"]
