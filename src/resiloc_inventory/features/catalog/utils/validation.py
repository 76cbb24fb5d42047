"""Catalog validation utilities.

Centralized rules for names, tags, indicator classification and scenario
weights that every catalog service applies before persisting.
"""

import re
from collections import Counter
from numbers import Real
from typing import Any, Dict, FrozenSet, Hashable, Iterable, List, Optional

from ....core.exceptions import BadRequestError
from ..entities.enums import IndicatorContext, IndicatorCriteria, ScenarioMetadataType, TemplateStatus


CRITERIA_BY_CONTEXT = {
    IndicatorContext.FRAMEWORK: frozenset({
        IndicatorCriteria.COHERENCE,
        IndicatorCriteria.COMPLIANCE,
        IndicatorCriteria.ADEQUACY,
    }),
    IndicatorContext.PROCESS: frozenset({
        IndicatorCriteria.SUSTAINABILITY,
        IndicatorCriteria.INNOVATION,
        IndicatorCriteria.INCLUSIVENESS,
    }),
    IndicatorContext.RESOURCE: frozenset({
        IndicatorCriteria.DIVERSITY,
        IndicatorCriteria.REDUNDANCY,
        IndicatorCriteria.MODULARITY,
    }),
}


class CatalogValidationRules:
    """Centralized validation rules for catalog data."""

    WHITESPACE_PATTERN = re.compile(r"\s+")

    RELEVANCE_MIN = 0.0
    RELEVANCE_MAX = 1.0
    DIRECTION_MIN = -1.0
    DIRECTION_MAX = 1.0

    @staticmethod
    def normalize_name(name: str) -> str:
        """Collapse whitespace runs and trim."""
        if not name or not isinstance(name, str) or not name.strip():
            raise BadRequestError("Name must be a non-empty string")
        return CatalogValidationRules.WHITESPACE_PATTERN.sub(" ", name).strip()

    @staticmethod
    def normalize_tag(tag: str) -> str:
        """Collapse whitespace, trim and lower-case a tag or metadata name."""
        return CatalogValidationRules.WHITESPACE_PATTERN.sub(" ", str(tag)).strip().lower()

    @staticmethod
    def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
        """Normalize tags, rejecting values that collide after normalization."""
        normalized = [CatalogValidationRules.normalize_tag(tag) for tag in (tags or [])]
        if has_duplicates(normalized):
            raise BadRequestError("Array of tags contains duplicate values")
        return normalized

    @staticmethod
    def is_compatible(context: IndicatorContext, criteria: IndicatorCriteria) -> bool:
        return IndicatorCriteria(criteria) in CRITERIA_BY_CONTEXT[IndicatorContext(context)]

    @staticmethod
    def validate_context_criteria(context: IndicatorContext, criteria: IndicatorCriteria) -> None:
        if not CatalogValidationRules.is_compatible(context, criteria):
            raise BadRequestError(
                f"Criteria '{IndicatorCriteria(criteria).value}' does not belong to "
                f"context '{IndicatorContext(context).value}'"
            )

    @staticmethod
    def validate_relevance(relevance: float) -> float:
        if not _is_number(relevance) or not (
            CatalogValidationRules.RELEVANCE_MIN <= relevance <= CatalogValidationRules.RELEVANCE_MAX
        ):
            raise BadRequestError("Relevance must be between 0 and 1")
        return float(relevance)

    @staticmethod
    def validate_direction(direction: float) -> float:
        if not _is_number(direction) or not (
            CatalogValidationRules.DIRECTION_MIN <= direction <= CatalogValidationRules.DIRECTION_MAX
        ):
            raise BadRequestError("Direction must be between -1 and 1")
        return float(direction)

    @staticmethod
    def validate_targets(min_target: Optional[float], max_target: Optional[float]) -> None:
        if min_target is not None and max_target is not None and min_target > max_target:
            raise BadRequestError("Min target must be smaller or equal to max target")

    @staticmethod
    def validate_scenario_metadata(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Check scenario metadata entries and return them with normalized names."""
        validated = []
        for entry in entries or []:
            try:
                entry_type = ScenarioMetadataType(entry.get("type"))
            except ValueError:
                raise BadRequestError(f"Unknown metadata type '{entry.get('type')}'")
            name = CatalogValidationRules.normalize_tag(entry.get("name", ""))
            if not name:
                raise BadRequestError("Metadata name must not be empty")
            value = entry.get("value")
            if value is not None:
                if entry_type == ScenarioMetadataType.TEXT and not isinstance(value, str):
                    raise BadRequestError(f"Value of metadata '{name}' must be a text")
                if entry_type == ScenarioMetadataType.NUMBER and not _is_number(value):
                    raise BadRequestError(f"Value of metadata '{name}' must be a number")
            validated.append({
                "name": name,
                "type": entry_type.value,
                "value": value,
                "mandatory": bool(entry.get("mandatory", False)),
            })

        if has_duplicates(item["name"] for item in validated):
            raise BadRequestError("Array of metadata contains duplicate names")
        return validated


def parse_status_filter(
    statuses: Optional[Iterable[str]],
    all_token: str = "default",
) -> FrozenSet[TemplateStatus]:
    """Status filter of a listing; ``all_token`` (or nothing) selects every status."""
    values = [statuses] if isinstance(statuses, str) else list(statuses or [])
    if not values or all_token in values:
        return frozenset(TemplateStatus)
    try:
        return frozenset(TemplateStatus(value) for value in values)
    except ValueError as e:
        raise BadRequestError(f"Unknown status filter: {e}")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def has_duplicates(values: Iterable[Hashable]) -> bool:
    return any(count > 1 for count in Counter(values).values())


def ensure_no_duplicates(values: Iterable[Hashable], label: str) -> None:
    if has_duplicates(values):
        raise BadRequestError(f"Array of {label} contains duplicate values")
