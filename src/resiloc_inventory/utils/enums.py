"""Enum coercion of caller-supplied values."""

from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import BadRequestError


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], value: Any, label: str) -> E:
    """Coerce ``value`` to ``enum_cls`` or raise ``BadRequestError``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise BadRequestError(f"Invalid {label} '{value}', expected one of: {allowed}")


def parse_optional_enum(enum_cls: Type[E], value: Any, label: str) -> Optional[E]:
    return None if value is None else parse_enum(enum_cls, value, label)
