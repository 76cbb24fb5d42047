"""Catalog validation utilities."""

from .metadata_rules import FIELD_RULES, MetadataRules
from .validation import (
    CRITERIA_BY_CONTEXT,
    CatalogValidationRules,
    ensure_no_duplicates,
    has_duplicates,
    parse_status_filter,
)

__all__ = [
    "FIELD_RULES",
    "MetadataRules",
    "CRITERIA_BY_CONTEXT",
    "CatalogValidationRules",
    "ensure_no_duplicates",
    "has_duplicates",
    "parse_status_filter",
]
