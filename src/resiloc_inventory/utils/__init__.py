"""Utility helpers for the inventory backend."""

from .datetime import utc_now
from .enums import parse_enum, parse_optional_enum
from .uuid import composite_id, generate_uuid_v4

__all__ = ["utc_now", "parse_enum", "parse_optional_enum", "composite_id", "generate_uuid_v4"]
