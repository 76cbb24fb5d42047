"""Indicator instance repositories."""

from .indicator_repository import IndicatorDatabaseRepository

__all__ = ["IndicatorDatabaseRepository"]
