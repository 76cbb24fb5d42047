"""Postgres repositories for scenario templates and their weights."""

import logging
from typing import Any, Dict, List, Optional

from ....core.exceptions import NotFoundError
from ....utils.datetime import utc_now
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.resiloc_scenario import ResilocScenario, ResilocScenarioIndicatorProxy
from ..utils.queries import (
    RESILOC_SCENARIO_DELETE,
    RESILOC_SCENARIO_GET_BY_ID,
    RESILOC_SCENARIO_GET_BY_IDS,
    RESILOC_SCENARIO_INSERT,
    RESILOC_SCENARIO_LINK_DELETE_MANY,
    RESILOC_SCENARIO_LINK_GET_BY_ID,
    RESILOC_SCENARIO_LINK_GET_BY_IDS,
    RESILOC_SCENARIO_LINK_INSERT,
    RESILOC_SCENARIO_LINK_UPDATE,
    RESILOC_SCENARIO_LIST_ALL,
    RESILOC_SCENARIO_UPDATE,
    RESILOC_SCENARIO_WITH_INDICATOR_EXISTS,
)

logger = logging.getLogger(__name__)


class ResilocScenarioDatabaseRepository:
    """Database repository for scenario templates."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    def _values(self, resiloc_scenario: ResilocScenario) -> tuple:
        return (
            resiloc_scenario.name,
            resiloc_scenario.description,
            resiloc_scenario.visibility.value,
            resiloc_scenario.status.value,
            resiloc_scenario.formula,
            [dict(entry) for entry in resiloc_scenario.metadata],
            list(resiloc_scenario.resiloc_indicator_ids),
        )

    @handle_database_errors("create resiloc scenario")
    async def create(self, resiloc_scenario: ResilocScenario) -> ResilocScenario:
        await self._db.execute_command(
            self._q(RESILOC_SCENARIO_INSERT),
            resiloc_scenario.id, *self._values(resiloc_scenario),
            resiloc_scenario.date_created, resiloc_scenario.date_modified,
        )
        logger.info(f"Created resiloc scenario {resiloc_scenario.id} '{resiloc_scenario.name}'")
        return resiloc_scenario

    @handle_database_errors("get resiloc scenario")
    async def get_by_id(self, resiloc_scenario_id: str) -> Optional[ResilocScenario]:
        row = await self._db.execute_fetchrow(self._q(RESILOC_SCENARIO_GET_BY_ID), resiloc_scenario_id)
        return self._map_row_to_resiloc_scenario(row) if row else None

    @handle_database_errors("get resiloc scenarios")
    async def get_by_ids(self, resiloc_scenario_ids: List[str]) -> List[ResilocScenario]:
        rows = await self._db.execute_query(self._q(RESILOC_SCENARIO_GET_BY_IDS), list(resiloc_scenario_ids))
        return [self._map_row_to_resiloc_scenario(row) for row in rows]

    @handle_database_errors("list resiloc scenarios")
    async def find_all(self) -> List[ResilocScenario]:
        rows = await self._db.execute_query(self._q(RESILOC_SCENARIO_LIST_ALL))
        return [self._map_row_to_resiloc_scenario(row) for row in rows]

    @handle_database_errors("update resiloc scenario")
    async def update(self, resiloc_scenario: ResilocScenario) -> ResilocScenario:
        resiloc_scenario.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(RESILOC_SCENARIO_UPDATE),
            resiloc_scenario.id, *self._values(resiloc_scenario), resiloc_scenario.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"Resiloc scenario {resiloc_scenario.id} does not exist")
        return resiloc_scenario

    @handle_database_errors("delete resiloc scenario")
    async def delete(self, resiloc_scenario_id: str) -> bool:
        status = await self._db.execute_command(self._q(RESILOC_SCENARIO_DELETE), resiloc_scenario_id)
        return affected_rows(status) > 0

    @handle_database_errors("check resiloc indicator links")
    async def exists_with_resiloc_indicator(self, resiloc_indicator_id: str) -> bool:
        return bool(
            await self._db.execute_fetchval(self._q(RESILOC_SCENARIO_WITH_INDICATOR_EXISTS), resiloc_indicator_id)
        )

    def _map_row_to_resiloc_scenario(self, row: Dict[str, Any]) -> ResilocScenario:
        return ResilocScenario(
            id=row["id"],
            name=row["name"],
            description=row.get("description") or "",
            visibility=row["visibility"],
            status=row["status"],
            formula=row.get("formula"),
            metadata=list(row.get("metadata") or []),
            resiloc_indicator_ids=list(row.get("resiloc_indicator_ids") or []),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )


class ResilocScenarioIndicatorProxyDatabaseRepository:
    """Database repository for scenario template weights."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    @handle_database_errors("create resiloc scenario indicator proxy")
    async def create(self, link: ResilocScenarioIndicatorProxy) -> ResilocScenarioIndicatorProxy:
        await self._db.execute_command(
            self._q(RESILOC_SCENARIO_LINK_INSERT),
            link.id, link.relevance, link.direction, link.date_created, link.date_modified,
        )
        return link

    @handle_database_errors("get resiloc scenario indicator proxy")
    async def get_by_id(self, link_id: str) -> Optional[ResilocScenarioIndicatorProxy]:
        row = await self._db.execute_fetchrow(self._q(RESILOC_SCENARIO_LINK_GET_BY_ID), link_id)
        return self._map_row_to_link(row) if row else None

    @handle_database_errors("get resiloc scenario indicator proxies")
    async def get_by_ids(self, link_ids: List[str]) -> List[ResilocScenarioIndicatorProxy]:
        rows = await self._db.execute_query(self._q(RESILOC_SCENARIO_LINK_GET_BY_IDS), list(link_ids))
        return [self._map_row_to_link(row) for row in rows]

    @handle_database_errors("update resiloc scenario indicator proxy")
    async def update(self, link: ResilocScenarioIndicatorProxy) -> ResilocScenarioIndicatorProxy:
        link.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(RESILOC_SCENARIO_LINK_UPDATE), link.id, link.relevance, link.direction, link.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"This id {link.id} does not exist")
        return link

    @handle_database_errors("delete resiloc scenario indicator proxies")
    async def delete_many(self, link_ids: List[str]) -> int:
        if not link_ids:
            return 0
        status = await self._db.execute_command(self._q(RESILOC_SCENARIO_LINK_DELETE_MANY), list(link_ids))
        return affected_rows(status)

    def _map_row_to_link(self, row: Dict[str, Any]) -> ResilocScenarioIndicatorProxy:
        return ResilocScenarioIndicatorProxy(
            id=row["id"],
            relevance=row["relevance"],
            direction=row["direction"],
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
