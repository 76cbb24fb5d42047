"""Database entities."""

from .protocols import DatabaseRepository

__all__ = ["DatabaseRepository"]
