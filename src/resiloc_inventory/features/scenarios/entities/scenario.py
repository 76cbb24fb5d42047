"""Scenario instance entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import SubmissionStatus, Visibility


@dataclass
class Scenario:
    """A community's instance of a scenario template."""

    resiloc_scenario_id: str
    id: str = field(default_factory=generate_uuid_v4)
    visibility: Visibility = Visibility.DRAFT
    status: SubmissionStatus = SubmissionStatus.ON_HOLD
    date_submitted: Optional[datetime] = None
    metadata: List[Dict[str, Any]] = field(default_factory=list)
    indicator_ids: List[str] = field(default_factory=list)
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.visibility = Visibility(self.visibility)
        self.status = SubmissionStatus(self.status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "visibility": self.visibility.value,
            "status": self.status.value,
            "dateSubmitted": self.date_submitted.isoformat() if self.date_submitted else None,
            "metadata": [dict(entry) for entry in self.metadata],
            "resilocScenarioId": self.resiloc_scenario_id,
            "indicatorIds": list(self.indicator_ids),
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }


@dataclass
class ScenarioIndicatorProxy:
    """Weights of one static proxy inside one indicator of a scenario instance."""

    id: str
    relevance: float = 0.0
    direction: float = 0.0
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "relevance": self.relevance, "direction": self.direction}
