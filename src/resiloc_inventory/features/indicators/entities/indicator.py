"""Indicator instance entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import Visibility


@dataclass
class Indicator:
    """An instance of an indicator template inside a scenario instance.

    Holds one ``proxy_of_indicator`` static proxy per proxy of the template.
    """

    resiloc_indicator_id: str
    id: str = field(default_factory=generate_uuid_v4)
    visibility: Visibility = Visibility.DRAFT
    static_proxy_ids: List[str] = field(default_factory=list)
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.visibility = Visibility(self.visibility)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "visibility": self.visibility.value,
            "resilocIndicatorId": self.resiloc_indicator_id,
            "staticProxyIds": list(self.static_proxy_ids),
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }
