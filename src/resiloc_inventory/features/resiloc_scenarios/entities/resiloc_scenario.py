"""Scenario template entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import TemplateStatus, Visibility
from ...catalog.utils.validation import CatalogValidationRules


@dataclass
class ResilocScenario:
    """A catalog scenario template grouping indicator templates.

    ``metadata`` is a list of ``{name, type, value, mandatory}`` entries that
    scenario instances copy on creation.
    """

    name: str
    id: str = field(default_factory=generate_uuid_v4)
    description: str = ""
    visibility: Visibility = Visibility.DRAFT
    status: TemplateStatus = TemplateStatus.VERIFIED
    formula: Optional[str] = None
    metadata: List[Dict[str, Any]] = field(default_factory=list)
    resiloc_indicator_ids: List[str] = field(default_factory=list)
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.name = CatalogValidationRules.normalize_name(self.name)
        self.visibility = Visibility(self.visibility)
        self.status = TemplateStatus(self.status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "visibility": self.visibility.value,
            "status": self.status.value,
            "formula": self.formula,
            "metadata": [dict(entry) for entry in self.metadata],
            "resilocIndicatorIds": list(self.resiloc_indicator_ids),
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }


@dataclass
class ResilocScenarioIndicatorProxy:
    """Weights of one proxy template inside one indicator of a scenario template.

    ``id`` is the composite key of the (scenario, indicator, proxy) triple.
    """

    id: str
    relevance: float = 0.0
    direction: float = 0.0
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "relevance": self.relevance,
            "direction": self.direction,
        }
