"""Visibility/status policy engine."""

from .services import VisibilityPolicy

__all__ = ["VisibilityPolicy"]
