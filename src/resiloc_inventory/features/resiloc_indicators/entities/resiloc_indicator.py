"""Indicator template entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import (
    IndicatorContext,
    IndicatorCriteria,
    IndicatorDimension,
    TemplateStatus,
    Visibility,
)
from ...catalog.utils.validation import CatalogValidationRules


@dataclass
class ResilocIndicator:
    """A catalog indicator template grouping proxy templates.

    ``criteria`` must belong to ``context``; the pair is checked on
    construction.
    """

    name: str
    context: IndicatorContext
    criteria: IndicatorCriteria
    id: str = field(default_factory=generate_uuid_v4)
    description: str = ""
    dimension: Optional[IndicatorDimension] = None
    tags: List[str] = field(default_factory=list)
    status: TemplateStatus = TemplateStatus.REQUESTED
    visibility: Visibility = Visibility.DRAFT
    resiloc_proxy_ids: List[str] = field(default_factory=list)
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.name = CatalogValidationRules.normalize_name(self.name)
        self.context = IndicatorContext(self.context)
        self.criteria = IndicatorCriteria(self.criteria)
        self.dimension = IndicatorDimension(self.dimension) if self.dimension else None
        self.status = TemplateStatus(self.status)
        self.visibility = Visibility(self.visibility)
        CatalogValidationRules.validate_context_criteria(self.context, self.criteria)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "context": self.context.value,
            "criteria": self.criteria.value,
            "dimension": self.dimension.value if self.dimension else None,
            "tags": list(self.tags),
            "status": self.status.value,
            "visibility": self.visibility.value,
            "resilocProxyIds": list(self.resiloc_proxy_ids),
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }
