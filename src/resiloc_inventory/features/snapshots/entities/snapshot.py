"""Snapshot entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import SnapshotType, SubmissionStatus, Visibility
from ...catalog.utils.validation import CatalogValidationRules


@dataclass
class Snapshot:
    """A community-owned set of snapshot-scoped static proxies.

    Once submitted, neither the membership nor the values of its proxies
    may change.
    """

    name: str
    type: SnapshotType
    id: str = field(default_factory=generate_uuid_v4)
    description: str = ""
    visibility: Visibility = Visibility.DRAFT
    status: SubmissionStatus = SubmissionStatus.ON_HOLD
    date_submitted: Optional[datetime] = None
    static_proxy_ids: List[str] = field(default_factory=list)
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.name = CatalogValidationRules.normalize_name(self.name)
        self.type = SnapshotType(self.type)
        self.visibility = Visibility(self.visibility)
        self.status = SubmissionStatus(self.status)

    @property
    def is_submitted(self) -> bool:
        return self.status == SubmissionStatus.SUBMITTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "visibility": self.visibility.value,
            "status": self.status.value,
            "dateSubmitted": self.date_submitted.isoformat() if self.date_submitted else None,
            "staticProxyIds": list(self.static_proxy_ids),
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }
