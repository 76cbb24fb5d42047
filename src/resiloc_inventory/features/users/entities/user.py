"""User domain entity and role enumerations."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Set

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4


class UserRole(str, Enum):
    """Per-community roles; ``admin`` only ever appears as a derived role."""
    ADMIN = "admin"
    RESILIENCE_EXPERT = "resilience_expert"
    LOCAL_MANAGER = "local_manager"
    COMMUNITY_ADMIN = "community_admin"
    CITIZEN = "citizen"


class ResilocServiceRole(str, Enum):
    """Machine accounts used by other RESILOC services."""
    SEMANTIC_LAYER = "semantic_layer"


_WHITESPACE = re.compile(r"\s")


def normalize_text(text: str) -> str:
    """Remove every whitespace character and lower-case."""
    return _WHITESPACE.sub("", text or "").lower()


def capitalize_words(text: Optional[str]) -> str:
    if not text:
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in text.lower().split(" "))


@dataclass
class User:
    """A platform account.

    ``user_roles`` maps community ids to the roles held there. Following a
    community creates an entry; unfollowing removes it.
    """

    username: str
    email: str
    password_hash: str = field(repr=False, default="")
    id: str = field(default_factory=generate_uuid_v4)
    is_admin: bool = False
    resiloc_service_role: Optional[ResilocServiceRole] = None
    user_roles: Dict[str, Set[UserRole]] = field(default_factory=dict)
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    is_active: bool = False
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.username = normalize_text(self.username)
        self.email = normalize_text(self.email)
        self.first_name = capitalize_words(self.first_name)
        self.last_name = capitalize_words(self.last_name)

    @property
    def is_resiloc_service(self) -> bool:
        return self.resiloc_service_role is not None

    def roles_in(self, community_id: str) -> Set[UserRole]:
        return set(self.user_roles.get(community_id, set()))

    def has_role(self, community_id: str, role: UserRole) -> bool:
        return role in self.user_roles.get(community_id, set())

    def follows(self, community_id: str) -> bool:
        return community_id in self.user_roles

    def to_dict(self) -> Dict[str, Any]:
        """Public representation, without the password hash."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "isAdmin": self.is_admin,
            "resilocServiceRole": self.resiloc_service_role.value if self.resiloc_service_role else None,
            "userRoles": {
                community_id: sorted(role.value for role in roles)
                for community_id, roles in self.user_roles.items()
            },
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "isActive": self.is_active,
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }
