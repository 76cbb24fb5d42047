"""Static proxy: a community-, indicator- or snapshot-scoped proxy instance."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import StaticProxyType, Visibility
from ...catalog.entities.metadata import ProxyMetadata


@dataclass
class StaticProxy:
    """An instance of a proxy template.

    ``metadata`` is an independent copy of the template's metadata taken at
    creation. ``resiloc_proxy_id`` never changes after creation.
    """

    resiloc_proxy_id: str
    type: StaticProxyType
    id: str = field(default_factory=generate_uuid_v4)
    value: Optional[float] = None
    min_target: Optional[float] = None
    max_target: Optional[float] = None
    visibility: Visibility = Visibility.DRAFT
    metadata: ProxyMetadata = field(default_factory=ProxyMetadata)
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.type = StaticProxyType(self.type)
        self.visibility = Visibility(self.visibility)

    @property
    def is_snapshot_proxy(self) -> bool:
        return self.type == StaticProxyType.PROXY_OF_SNAPSHOT

    @property
    def is_community_proxy(self) -> bool:
        return self.type == StaticProxyType.PROXY_OF_COMMUNITY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "value": self.value,
            "minTarget": self.min_target,
            "maxTarget": self.max_target,
            "visibility": self.visibility.value,
            "metadata": self.metadata.to_dict(),
            "resilocProxyId": self.resiloc_proxy_id,
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }
