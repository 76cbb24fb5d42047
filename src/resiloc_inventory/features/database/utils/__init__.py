"""Database utilities."""

from .error_handling import handle_database_errors, unique_violation_fields
from .results import affected_rows
from .schema import SCHEMA_STATEMENTS, create_schema

__all__ = [
    "affected_rows",
    "handle_database_errors",
    "unique_violation_fields",
    "SCHEMA_STATEMENTS",
    "create_schema",
]
