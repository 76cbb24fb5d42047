"""Service wiring.

``Repositories`` groups the persistence adapters; ``ServiceContainer``
builds every service on top of them once per process.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.settings import InventorySettings
from ..features.communities import CommunityDatabaseRepository, CommunityRepository, CommunityService
from ..features.database import AsyncConnectionPool, DatabaseRepository, PostgresDatabase, create_schema
from ..features.identity import FlidCipher, IdentityService
from ..features.indicators import IndicatorDatabaseRepository, IndicatorRepository, IndicatorsService
from ..features.resiloc_indicators import (
    ResilocIndicatorDatabaseRepository,
    ResilocIndicatorRepository,
    ResilocIndicatorService,
)
from ..features.resiloc_proxies import ResilocProxyDatabaseRepository, ResilocProxyRepository, ResilocProxyService
from ..features.resiloc_scenarios import (
    ResilocScenarioDatabaseRepository,
    ResilocScenarioIndicatorProxyDatabaseRepository,
    ResilocScenarioIndicatorProxyRepository,
    ResilocScenarioRepository,
    ResilocScenarioService,
)
from ..features.scenarios import (
    ScenarioDatabaseRepository,
    ScenarioIndicatorProxyDatabaseRepository,
    ScenarioIndicatorProxyRepository,
    ScenarioRepository,
    ScenariosService,
)
from ..features.snapshots import SnapshotDatabaseRepository, SnapshotRepository, SnapshotsService
from ..features.static_proxies import StaticProxiesService, StaticProxyDatabaseRepository, StaticProxyRepository
from ..features.users import PasswordHasher, PwdlibPasswordHasher, UserDatabaseRepository, UserRepository, UserService

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    users: UserRepository
    communities: CommunityRepository
    resiloc_proxies: ResilocProxyRepository
    static_proxies: StaticProxyRepository
    resiloc_indicators: ResilocIndicatorRepository
    indicators: IndicatorRepository
    resiloc_scenarios: ResilocScenarioRepository
    resiloc_scenario_links: ResilocScenarioIndicatorProxyRepository
    scenarios: ScenarioRepository
    scenario_links: ScenarioIndicatorProxyRepository
    snapshots: SnapshotRepository

    @classmethod
    def from_database(cls, database: DatabaseRepository, schema: str) -> "Repositories":
        return cls(
            users=UserDatabaseRepository(database, schema),
            communities=CommunityDatabaseRepository(database, schema),
            resiloc_proxies=ResilocProxyDatabaseRepository(database, schema),
            static_proxies=StaticProxyDatabaseRepository(database, schema),
            resiloc_indicators=ResilocIndicatorDatabaseRepository(database, schema),
            indicators=IndicatorDatabaseRepository(database, schema),
            resiloc_scenarios=ResilocScenarioDatabaseRepository(database, schema),
            resiloc_scenario_links=ResilocScenarioIndicatorProxyDatabaseRepository(database, schema),
            scenarios=ScenarioDatabaseRepository(database, schema),
            scenario_links=ScenarioIndicatorProxyDatabaseRepository(database, schema),
            snapshots=SnapshotDatabaseRepository(database, schema),
        )


class ServiceContainer:
    """Every service of the inventory, built over one set of repositories."""

    def __init__(
        self,
        settings: InventorySettings,
        repositories: Repositories,
        hasher: Optional[PasswordHasher] = None,
        pool: Optional[AsyncConnectionPool] = None,
    ):
        self.settings = settings
        self.repositories = repositories
        self._pool = pool
        repos = repositories

        self.identity = IdentityService(
            repos.users,
            FlidCipher(settings.flid_salt.get_secret_value()),
            settings.selected_community_tag,
        )
        self.users = UserService(repos.users, repos.communities, self.identity, hasher or PwdlibPasswordHasher())
        self.static_proxies = StaticProxiesService(
            repos.static_proxies, repos.resiloc_proxies, repos.communities, repos.snapshots, self.identity
        )
        self.indicators = IndicatorsService(
            repos.indicators, repos.resiloc_indicators, repos.resiloc_proxies, self.static_proxies
        )
        self.resiloc_proxies = ResilocProxyService(
            repos.resiloc_proxies,
            repos.communities,
            repos.resiloc_indicators,
            self.identity,
            settings.default_requested_status,
        )
        self.resiloc_indicators = ResilocIndicatorService(
            repos.resiloc_indicators,
            repos.resiloc_proxies,
            repos.indicators,
            repos.resiloc_scenarios,
            repos.communities,
            self.identity,
            settings.default_requested_status,
        )
        self.resiloc_scenarios = ResilocScenarioService(
            repos.resiloc_scenarios,
            repos.resiloc_scenario_links,
            repos.resiloc_indicators,
            repos.resiloc_proxies,
            repos.communities,
            self.identity,
        )
        self.scenarios = ScenariosService(
            repos.scenarios,
            repos.scenario_links,
            repos.resiloc_scenarios,
            repos.resiloc_scenario_links,
            self.indicators,
            self.static_proxies,
            repos.communities,
            self.identity,
        )
        self.snapshots = SnapshotsService(repos.snapshots, self.static_proxies, repos.communities, self.identity)
        self.communities = CommunityService(
            repos.communities,
            repos.resiloc_proxies,
            repos.resiloc_scenarios,
            self.users,
            self.static_proxies,
            self.scenarios,
            self.snapshots,
            self.identity,
        )

    @classmethod
    async def create(cls, settings: InventorySettings) -> "ServiceContainer":
        """Open the asyncpg pool, ensure the schema and finish interrupted removals."""
        pool = AsyncConnectionPool(settings)
        database = PostgresDatabase(pool)
        if settings.run_migrations:
            await create_schema(database, settings.database_schema)

        container = cls(settings, Repositories.from_database(database, settings.database_schema), pool=pool)
        resumed = await container.communities.resume_pending_deletions()
        if resumed:
            logger.warning(f"Finished {resumed} interrupted community removals on startup")
        return container

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()

    async def is_healthy(self) -> bool:
        if self._pool is None:
            return True
        return await self._pool.is_healthy()
