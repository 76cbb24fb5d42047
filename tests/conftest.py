"""Test configuration and fixtures for the inventory backend.

Services run against in-memory repositories that honour the repository
protocols, including the two-sided writes of community graph edges.
"""

import copy
from typing import Any, Dict, Iterable, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from resiloc_inventory.api.container import Repositories, ServiceContainer
from resiloc_inventory.config.settings import InventorySettings
from resiloc_inventory.core.exceptions import NotFoundError, UniqueConstraintError
from resiloc_inventory.features.catalog.entities.enums import Visibility
from resiloc_inventory.features.communities.entities.community import (
    Community,
    CommunityRelation,
    CommunitySetField,
)
from resiloc_inventory.features.users.entities.user import User, UserRole
from resiloc_inventory.utils.datetime import utc_now

JWT_SECRET = "inventory-test-secret"
ADMIN = "admin"


class InMemoryRepository:
    """Dict-backed store; records are copied in and out like rows."""

    def __init__(self):
        self._records: Dict[str, Any] = {}

    @staticmethod
    def _ordered(records: Iterable[Any]) -> List[Any]:
        return [
            copy.deepcopy(record)
            for record in sorted(records, key=lambda record: getattr(record, "date_created", 0))
        ]

    @property
    def records(self) -> List[Any]:
        return self._ordered(self._records.values())

    async def create(self, record):
        self._records[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def get_by_id(self, record_id: str):
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def get_by_ids(self, record_ids: List[str]) -> List[Any]:
        wanted = set(record_ids)
        return self._ordered(record for record in self._records.values() if record.id in wanted)

    async def find_all(self) -> List[Any]:
        return self._ordered(self._records.values())

    async def update(self, record):
        if hasattr(record, "date_modified"):
            record.date_modified = utc_now()
        self._records[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    async def delete_many(self, record_ids: List[str]) -> int:
        return sum(1 for record_id in record_ids if self._records.pop(record_id, None) is not None)


class FakeResilocIndicatorRepository(InMemoryRepository):
    async def exists_with_resiloc_proxy(self, resiloc_proxy_id: str) -> bool:
        return any(resiloc_proxy_id in record.resiloc_proxy_ids for record in self._records.values())


class FakeIndicatorRepository(InMemoryRepository):
    async def exists_for_resiloc_indicator(self, resiloc_indicator_id: str) -> bool:
        return any(record.resiloc_indicator_id == resiloc_indicator_id for record in self._records.values())


class FakeResilocScenarioRepository(InMemoryRepository):
    async def exists_with_resiloc_indicator(self, resiloc_indicator_id: str) -> bool:
        return any(resiloc_indicator_id in record.resiloc_indicator_ids for record in self._records.values())


class FakeSnapshotRepository(InMemoryRepository):
    async def find_by_static_proxy(self, static_proxy_id: str):
        for record in self._records.values():
            if static_proxy_id in record.static_proxy_ids:
                return copy.deepcopy(record)
        return None


class FakeStaticProxyRepository(InMemoryRepository):
    async def find_by_visibility(self, visibility: Visibility) -> List[Any]:
        return self._ordered(record for record in self._records.values() if record.visibility == visibility)


class FakeCommunityRepository(InMemoryRepository):
    """Community store; only name, visibility and metadata go through ``update``."""

    def _row(self, community_id: str) -> Community:
        community = self._records.get(community_id)
        if community is None:
            raise NotFoundError(f"Community {community_id} does not exist")
        return community

    async def update(self, community: Community) -> Community:
        row = self._row(community.id)
        row.name = community.name
        row.visibility = community.visibility
        row.metadata = copy.deepcopy(community.metadata)
        row.date_modified = utc_now()
        return copy.deepcopy(row)

    async def add_to_set(self, community_id: str, set_field: CommunitySetField, value: str) -> None:
        values = self._row(community_id).id_set(set_field)
        if value not in values:
            values.append(value)

    async def pull_from_set(self, community_id: str, set_field: CommunitySetField, value: str) -> None:
        values = self._row(community_id).id_set(set_field)
        if value in values:
            values.remove(value)

    async def pull_from_all(self, set_field: CommunitySetField, value: str) -> int:
        pulled = 0
        for community in self._records.values():
            values = community.id_set(set_field)
            if value in values:
                values.remove(value)
                pulled += 1
        return pulled

    async def link(self, community_id: str, relation: CommunityRelation, other_id: str) -> None:
        relation = CommunityRelation(relation)
        for source, target, side in (
            (community_id, other_id, relation),
            (other_id, community_id, relation.reverse),
        ):
            edges = self._row(source).relation(side)
            if target not in edges:
                edges.append(target)

    async def unlink(self, community_id: str, relation: CommunityRelation, other_id: str) -> None:
        relation = CommunityRelation(relation)
        for source, target, side in (
            (community_id, other_id, relation),
            (other_id, community_id, relation.reverse),
        ):
            community = self._records.get(source)
            if community is not None and target in community.relation(side):
                community.relation(side).remove(target)

    async def set_static_proxy(self, community_id: str, resiloc_proxy_id: str, static_proxy_id: str) -> None:
        self._row(community_id).static_proxies[resiloc_proxy_id] = static_proxy_id

    async def unset_static_proxy(self, community_id: str, resiloc_proxy_id: str) -> None:
        self._row(community_id).static_proxies.pop(resiloc_proxy_id, None)

    async def set_scenario(self, community_id: str, resiloc_scenario_id: str, scenario_id: str) -> None:
        self._row(community_id).scenarios[resiloc_scenario_id] = scenario_id

    async def unset_scenario(self, community_id: str, resiloc_scenario_id: str) -> None:
        self._row(community_id).scenarios.pop(resiloc_scenario_id, None)

    async def mark_deletion_started(self, community_id: str, started_at) -> None:
        self._row(community_id).deletion_started_at = started_at

    async def find_pending_deletions(self) -> List[Community]:
        pending = [community for community in self._records.values() if community.is_being_deleted]
        return [copy.deepcopy(community) for community in sorted(pending, key=lambda c: c.deletion_started_at)]

    def _first(self, predicate) -> Optional[str]:
        for community in self.records:
            if predicate(community):
                return community.id
        return None

    async def find_id_by_static_proxy(self, static_proxy_id: str) -> Optional[str]:
        return self._first(lambda community: static_proxy_id in community.static_proxies.values())

    async def find_id_by_snapshot(self, snapshot_id: str) -> Optional[str]:
        return self._first(lambda community: snapshot_id in community.snapshots)

    async def find_id_by_scenario(self, scenario_id: str) -> Optional[str]:
        return self._first(lambda community: scenario_id in community.scenarios.values())

    async def find_id_by_requested_proxy(self, resiloc_proxy_id: str) -> Optional[str]:
        return self._first(lambda community: resiloc_proxy_id in community.requested_proxies)

    async def find_id_by_requested_indicator(self, resiloc_indicator_id: str) -> Optional[str]:
        return self._first(lambda community: resiloc_indicator_id in community.requested_indicators)

    async def is_resiloc_proxy_used(self, resiloc_proxy_id: str) -> bool:
        return any(resiloc_proxy_id in community.static_proxies for community in self._records.values())

    async def is_resiloc_scenario_used(self, resiloc_scenario_id: str) -> bool:
        return any(resiloc_scenario_id in community.scenarios for community in self._records.values())

    async def find_followed_by(self, user_id: str) -> List[Community]:
        return [community for community in self.records if user_id in community.users]

    async def find_followable_by(self, user_id: str) -> List[Community]:
        return [
            community for community in self.records
            if user_id not in community.users and community.visibility != Visibility.DRAFT
        ]


class FakeUserRepository:
    """User store keyed by username; roles live beside the profile like the roles table."""

    def __init__(self):
        self._users: Dict[str, User] = {}

    def _row(self, username: str) -> User:
        user = self._users.get(username)
        if user is None:
            raise NotFoundError(f"Username {username} does not exist")
        return user

    async def create(self, user: User) -> User:
        if user.username in self._users:
            raise UniqueConstraintError(f"Username {user.username} already exists", ["username"])
        if any(existing.email == user.email for existing in self._users.values()):
            raise UniqueConstraintError(f"Email {user.email} already exists", ["email"])
        self._users[user.username] = copy.deepcopy(user)
        return copy.deepcopy(user)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        for user in self._users.values():
            if user.id == user_id:
                return copy.deepcopy(user)
        return None

    async def get_by_username(self, username: str) -> Optional[User]:
        user = self._users.get(username)
        return copy.deepcopy(user) if user is not None else None

    async def find_all(self) -> List[User]:
        return [copy.deepcopy(user) for user in self._users.values()]

    async def update(self, user: User) -> User:
        stored = copy.deepcopy(user)
        stored.user_roles = self._row(user.username).user_roles
        self._users[user.username] = stored
        return copy.deepcopy(stored)

    async def delete(self, username: str) -> bool:
        return self._users.pop(username, None) is not None

    async def set_roles(self, username: str, community_id: str, roles: Iterable[UserRole]) -> None:
        self._row(username).user_roles[community_id] = set(roles)

    async def add_roles(self, username: str, community_id: str, roles: Iterable[UserRole]) -> None:
        self._row(username).user_roles.setdefault(community_id, set()).update(roles)

    async def remove_role(self, username: str, community_id: str, role: UserRole) -> None:
        self._row(username).user_roles.get(community_id, set()).discard(role)

    async def clear_roles(self, username: str, community_id: str) -> None:
        self._row(username).user_roles.pop(community_id, None)


class PlainPasswordHasher:
    """Reversible stand-in so tests do not pay for argon2."""

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


def template_metadata() -> Dict[str, Dict[str, Any]]:
    """Complete descriptive metadata of a proxy template."""
    return {
        "certified": {"type": "static", "value": True},
        "dateOfData": {"type": "required"},
        "periodOfReference": {"type": "required"},
        "sourceType": {"type": "default", "value": "survey"},
        "actualSource": {"type": "default", "value": "municipality"},
        "tooltip": {"type": "static", "value": "Share of households"},
        "availability": {"type": "default", "value": "measured"},
        "typeOfData": {"type": "static", "value": "number"},
    }


def required_values() -> Dict[str, Dict[str, Any]]:
    """Values of the required fields of ``template_metadata``."""
    return {
        "dateOfData": {"value": "2021-03-01"},
        "periodOfReference": {"from": "2020-01-01", "to": "2020-12-31"},
    }


class Seeder:
    """Builds records through the services, the way callers would."""

    admin_name = ADMIN
    template_metadata = staticmethod(template_metadata)
    required_values = staticmethod(required_values)

    def __init__(self, container: ServiceContainer):
        self.container = container

    def flid(self, community_id: str) -> str:
        return self.container.identity.cipher_community_id(community_id)

    async def admin(self, username: str = ADMIN) -> User:
        existing = await self.container.repositories.users.get_by_username(username)
        if existing is not None:
            return existing
        return await self.user(username, is_admin=True)

    async def user(self, username: str, **kwargs) -> User:
        return await self.container.users.create(
            username=username,
            email=f"{username}@example.org",
            password="secret",
            **kwargs,
        )

    async def community(self, name: str = "C1", visibility: Visibility = Visibility.COMMUNITY) -> Community:
        return await self.container.communities.create({"name": name, "visibility": visibility})

    async def member(self, username: str, community_id: str, roles: Iterable[UserRole] = ()) -> User:
        """A user following the community, optionally holding extra roles."""
        await self.admin()
        user = await self.user(username)
        await self.container.communities.assign_user_for_community(community_id, username, ADMIN)
        if roles:
            await self.container.users.assign_user_role(username, community_id, list(roles), ADMIN)
        return await self.container.repositories.users.get_by_username(user.username)

    async def resiloc_proxy(
        self,
        name: str = "P1",
        visibility: Visibility = Visibility.PUBLIC,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        await self.admin()
        return await self.container.resiloc_proxies.create(
            {
                "name": name,
                "visibility": visibility,
                "metadata": metadata if metadata is not None else template_metadata(),
            },
            ADMIN,
        )

    async def resiloc_indicator(
        self,
        name: str,
        resiloc_proxy_ids: List[str],
        context: str = "resource",
        criteria: str = "diversity",
        visibility: Visibility = Visibility.PUBLIC,
    ):
        await self.admin()
        created = await self.container.resiloc_indicators.create(
            {"name": name, "context": context, "criteria": criteria, "visibility": visibility}, ADMIN
        )
        if resiloc_proxy_ids:
            created = await self.container.resiloc_indicators.assign_resiloc_proxies_for_resiloc_indicator(
                created.id, resiloc_proxy_ids, ADMIN
            )
        return created

    async def resiloc_scenario(self, name: str, resiloc_indicator_ids: List[str]):
        created = await self.container.resiloc_scenarios.create({"name": name, "visibility": Visibility.PUBLIC})
        if resiloc_indicator_ids:
            created = await self.container.resiloc_scenarios.assign_resiloc_indicators_for_resiloc_scenario(
                created.id, resiloc_indicator_ids
            )
        return created

    async def configured_static_proxy(self, community_id: str, resiloc_proxy_id: str, **changes):
        """Select a proxy for the community and fill in its configuration."""
        community = await self.container.communities.select_static_proxies_for_community(
            community_id,
            list((await self.container.repositories.communities.get_by_id(community_id)).static_proxies)
            + [resiloc_proxy_id],
            ADMIN,
        )
        static_proxy_id = community.static_proxies[resiloc_proxy_id]
        configuration = {"visibility": Visibility.COMMUNITY, "min_target": 0, "max_target": 100}
        configuration.update(changes)
        return await self.container.static_proxies.update_static_proxy_of_community(
            static_proxy_id, configuration, ADMIN
        )


@pytest.fixture
def settings():
    """Settings for tests; tokens are HS256 signed with ``JWT_SECRET``."""
    return InventorySettings(
        environment="testing",
        flid_salt=SecretStr("test-salt"),
        jwt_public_key=SecretStr(JWT_SECRET),
        jwt_algorithms=["HS256"],
        run_migrations=False,
    )


@pytest.fixture
def repositories():
    return Repositories(
        users=FakeUserRepository(),
        communities=FakeCommunityRepository(),
        resiloc_proxies=InMemoryRepository(),
        static_proxies=FakeStaticProxyRepository(),
        resiloc_indicators=FakeResilocIndicatorRepository(),
        indicators=FakeIndicatorRepository(),
        resiloc_scenarios=FakeResilocScenarioRepository(),
        resiloc_scenario_links=InMemoryRepository(),
        scenarios=InMemoryRepository(),
        scenario_links=InMemoryRepository(),
        snapshots=FakeSnapshotRepository(),
    )


@pytest.fixture
def container(settings, repositories):
    return ServiceContainer(settings, repositories, hasher=PlainPasswordHasher())


@pytest.fixture
def seed(container):
    return Seeder(container)


@pytest.fixture
def mock_database():
    """AsyncMock ``DatabaseRepository``; ``transaction()`` yields ``mock_database.tx``."""
    database = AsyncMock()
    database.execute_command.return_value = "UPDATE 1"
    tx = AsyncMock()
    tx.execute_command.return_value = "UPDATE 1"
    database.tx = tx
    database.transaction = MagicMock()
    database.transaction.return_value.__aenter__.return_value = tx
    database.transaction.return_value.__aexit__.return_value = False
    return database
