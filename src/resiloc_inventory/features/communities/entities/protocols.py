"""Protocol interfaces for community persistence."""

from abc import abstractmethod
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from .community import Community, CommunityRelation, CommunitySetField


@runtime_checkable
class CommunityRepository(Protocol):
    """Protocol for community persistence.

    Graph edges are always written on both endpoints in one transaction.
    Association maps are written one key at a time.
    """

    @abstractmethod
    async def create(self, community: Community) -> Community:
        ...

    @abstractmethod
    async def get_by_id(self, community_id: str) -> Optional[Community]:
        ...

    @abstractmethod
    async def get_by_ids(self, community_ids: List[str]) -> List[Community]:
        ...

    @abstractmethod
    async def find_all(self) -> List[Community]:
        ...

    @abstractmethod
    async def update(self, community: Community) -> Community:
        """Persist name, visibility and metadata."""
        ...

    @abstractmethod
    async def delete(self, community_id: str) -> bool:
        ...

    @abstractmethod
    async def add_to_set(self, community_id: str, set_field: CommunitySetField, value: str) -> None:
        ...

    @abstractmethod
    async def pull_from_set(self, community_id: str, set_field: CommunitySetField, value: str) -> None:
        ...

    @abstractmethod
    async def pull_from_all(self, set_field: CommunitySetField, value: str) -> int:
        """Remove ``value`` from the set of every community holding it."""
        ...

    @abstractmethod
    async def link(self, community_id: str, relation: CommunityRelation, other_id: str) -> None:
        """Add an edge and its reverse atomically."""
        ...

    @abstractmethod
    async def unlink(self, community_id: str, relation: CommunityRelation, other_id: str) -> None:
        """Remove an edge and its reverse atomically."""
        ...

    @abstractmethod
    async def set_static_proxy(self, community_id: str, resiloc_proxy_id: str, static_proxy_id: str) -> None:
        ...

    @abstractmethod
    async def unset_static_proxy(self, community_id: str, resiloc_proxy_id: str) -> None:
        ...

    @abstractmethod
    async def set_scenario(self, community_id: str, resiloc_scenario_id: str, scenario_id: str) -> None:
        ...

    @abstractmethod
    async def unset_scenario(self, community_id: str, resiloc_scenario_id: str) -> None:
        ...

    @abstractmethod
    async def mark_deletion_started(self, community_id: str, started_at: datetime) -> None:
        ...

    @abstractmethod
    async def find_pending_deletions(self) -> List[Community]:
        ...

    @abstractmethod
    async def find_id_by_static_proxy(self, static_proxy_id: str) -> Optional[str]:
        """Owner of a community-level static proxy (association map only)."""
        ...

    @abstractmethod
    async def find_id_by_snapshot(self, snapshot_id: str) -> Optional[str]:
        ...

    @abstractmethod
    async def find_id_by_scenario(self, scenario_id: str) -> Optional[str]:
        ...

    @abstractmethod
    async def find_id_by_requested_proxy(self, resiloc_proxy_id: str) -> Optional[str]:
        ...

    @abstractmethod
    async def find_id_by_requested_indicator(self, resiloc_indicator_id: str) -> Optional[str]:
        ...

    @abstractmethod
    async def is_resiloc_proxy_used(self, resiloc_proxy_id: str) -> bool:
        """True when any community holds an instance of the proxy template."""
        ...

    @abstractmethod
    async def is_resiloc_scenario_used(self, resiloc_scenario_id: str) -> bool:
        ...

    @abstractmethod
    async def find_followed_by(self, user_id: str) -> List[Community]:
        ...

    @abstractmethod
    async def find_followable_by(self, user_id: str) -> List[Community]:
        """Non-draft communities the user does not follow yet."""
        ...
