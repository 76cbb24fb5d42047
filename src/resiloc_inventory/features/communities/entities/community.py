"""Community aggregate."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import Visibility


class CommunityRelation(str, Enum):
    """Edges of the community graph."""
    PARENTS = "parents"
    PEERS = "peers"
    CHILDREN = "children"

    @property
    def reverse(self) -> "CommunityRelation":
        """The list the other endpoint keeps for the same edge."""
        return _REVERSE_RELATION[self]


_REVERSE_RELATION = {
    CommunityRelation.PARENTS: CommunityRelation.CHILDREN,
    CommunityRelation.CHILDREN: CommunityRelation.PARENTS,
    CommunityRelation.PEERS: CommunityRelation.PEERS,
}


class EdgeOperation(str, Enum):
    LINK = "link"
    UNLINK = "unlink"


class CommunitySetField(str, Enum):
    """Id sets a community owns outside the graph and the association maps."""
    USERS = "users"
    REQUESTED_PROXIES = "requested_proxies"
    REQUESTED_INDICATORS = "requested_indicators"
    SNAPSHOTS = "snapshots"


_WHITESPACE_RUN = re.compile(r"\s\s+")


def normalize_community_name(name: str) -> str:
    return _WHITESPACE_RUN.sub(" ", name or "").strip()


@dataclass
class CommunityMetadata:
    description: str = ""
    geometry: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"description": self.description, "geometry": self.geometry}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CommunityMetadata":
        data = data or {}
        return cls(description=data.get("description") or "", geometry=data.get("geometry") or "")


@dataclass
class Community:
    """A tenant of the inventory.

    ``static_proxies`` maps a proxy template id to the community's own
    instance of it; ``scenarios`` does the same for scenario templates.
    ``users`` holds the ids of following users.
    """

    name: str
    id: str = field(default_factory=generate_uuid_v4)
    visibility: Visibility = Visibility.DRAFT
    metadata: CommunityMetadata = field(default_factory=CommunityMetadata)
    users: List[str] = field(default_factory=list)
    parents: List[str] = field(default_factory=list)
    peers: List[str] = field(default_factory=list)
    children: List[str] = field(default_factory=list)
    static_proxies: Dict[str, str] = field(default_factory=dict)
    scenarios: Dict[str, str] = field(default_factory=dict)
    requested_proxies: List[str] = field(default_factory=list)
    requested_indicators: List[str] = field(default_factory=list)
    snapshots: List[str] = field(default_factory=list)
    deletion_started_at: Optional[datetime] = None
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.name = normalize_community_name(self.name)
        self.visibility = Visibility(self.visibility)

    def relation(self, relation: CommunityRelation) -> List[str]:
        return getattr(self, CommunityRelation(relation).value)

    def id_set(self, set_field: CommunitySetField) -> List[str]:
        return getattr(self, CommunitySetField(set_field).value)

    @property
    def is_being_deleted(self) -> bool:
        return self.deletion_started_at is not None

    def to_limited_dict(self) -> Dict[str, Any]:
        """View for callers that only follow the community."""
        return {"id": self.id, "name": self.name, "metadata": self.metadata.to_dict()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "visibility": self.visibility.value,
            "metadata": self.metadata.to_dict(),
            "users": list(self.users),
            "parents": list(self.parents),
            "peers": list(self.peers),
            "children": list(self.children),
            "staticProxies": dict(self.static_proxies),
            "scenarios": dict(self.scenarios),
            "requestedProxies": list(self.requested_proxies),
            "requestedIndicators": list(self.requested_indicators),
            "snapshots": list(self.snapshots),
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }
