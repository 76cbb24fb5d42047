"""Postgres repositories for scenario instances and their weights."""

import logging
from typing import Any, Dict, List, Optional

from ....core.exceptions import NotFoundError
from ....utils.datetime import utc_now
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.scenario import Scenario, ScenarioIndicatorProxy
from ..utils.queries import (
    SCENARIO_DELETE,
    SCENARIO_GET_BY_ID,
    SCENARIO_GET_BY_IDS,
    SCENARIO_INSERT,
    SCENARIO_LINK_DELETE_MANY,
    SCENARIO_LINK_GET_BY_ID,
    SCENARIO_LINK_GET_BY_IDS,
    SCENARIO_LINK_INSERT,
    SCENARIO_LINK_UPDATE,
    SCENARIO_LIST_ALL,
    SCENARIO_UPDATE,
)

logger = logging.getLogger(__name__)


class ScenarioDatabaseRepository:
    """Database repository for scenario instances."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    @handle_database_errors("create scenario")
    async def create(self, scenario: Scenario) -> Scenario:
        await self._db.execute_command(
            self._q(SCENARIO_INSERT),
            scenario.id, scenario.visibility.value, scenario.status.value, scenario.date_submitted,
            [dict(entry) for entry in scenario.metadata], scenario.resiloc_scenario_id,
            list(scenario.indicator_ids), scenario.date_created, scenario.date_modified,
        )
        logger.info(f"Created scenario {scenario.id} of resiloc scenario {scenario.resiloc_scenario_id}")
        return scenario

    @handle_database_errors("get scenario")
    async def get_by_id(self, scenario_id: str) -> Optional[Scenario]:
        row = await self._db.execute_fetchrow(self._q(SCENARIO_GET_BY_ID), scenario_id)
        return self._map_row_to_scenario(row) if row else None

    @handle_database_errors("get scenarios")
    async def get_by_ids(self, scenario_ids: List[str]) -> List[Scenario]:
        rows = await self._db.execute_query(self._q(SCENARIO_GET_BY_IDS), list(scenario_ids))
        return [self._map_row_to_scenario(row) for row in rows]

    @handle_database_errors("list scenarios")
    async def find_all(self) -> List[Scenario]:
        rows = await self._db.execute_query(self._q(SCENARIO_LIST_ALL))
        return [self._map_row_to_scenario(row) for row in rows]

    @handle_database_errors("update scenario")
    async def update(self, scenario: Scenario) -> Scenario:
        scenario.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(SCENARIO_UPDATE),
            scenario.id, scenario.visibility.value, scenario.status.value, scenario.date_submitted,
            [dict(entry) for entry in scenario.metadata], list(scenario.indicator_ids), scenario.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"Scenario {scenario.id} does not exist")
        return scenario

    @handle_database_errors("delete scenario")
    async def delete(self, scenario_id: str) -> bool:
        status = await self._db.execute_command(self._q(SCENARIO_DELETE), scenario_id)
        return affected_rows(status) > 0

    def _map_row_to_scenario(self, row: Dict[str, Any]) -> Scenario:
        return Scenario(
            id=row["id"],
            visibility=row["visibility"],
            status=row["status"],
            date_submitted=row.get("date_submitted"),
            metadata=list(row.get("metadata") or []),
            resiloc_scenario_id=row["resiloc_scenario_id"],
            indicator_ids=list(row.get("indicator_ids") or []),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )


class ScenarioIndicatorProxyDatabaseRepository:
    """Database repository for scenario instance weights."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    @handle_database_errors("create scenario indicator proxy")
    async def create(self, link: ScenarioIndicatorProxy) -> ScenarioIndicatorProxy:
        await self._db.execute_command(
            self._q(SCENARIO_LINK_INSERT),
            link.id, link.relevance, link.direction, link.date_created, link.date_modified,
        )
        return link

    @handle_database_errors("get scenario indicator proxy")
    async def get_by_id(self, link_id: str) -> Optional[ScenarioIndicatorProxy]:
        row = await self._db.execute_fetchrow(self._q(SCENARIO_LINK_GET_BY_ID), link_id)
        return self._map_row_to_link(row) if row else None

    @handle_database_errors("get scenario indicator proxies")
    async def get_by_ids(self, link_ids: List[str]) -> List[ScenarioIndicatorProxy]:
        rows = await self._db.execute_query(self._q(SCENARIO_LINK_GET_BY_IDS), list(link_ids))
        return [self._map_row_to_link(row) for row in rows]

    @handle_database_errors("update scenario indicator proxy")
    async def update(self, link: ScenarioIndicatorProxy) -> ScenarioIndicatorProxy:
        link.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(SCENARIO_LINK_UPDATE), link.id, link.relevance, link.direction, link.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"This id {link.id} does not exist")
        return link

    @handle_database_errors("delete scenario indicator proxies")
    async def delete_many(self, link_ids: List[str]) -> int:
        if not link_ids:
            return 0
        status = await self._db.execute_command(self._q(SCENARIO_LINK_DELETE_MANY), list(link_ids))
        return affected_rows(status)

    def _map_row_to_link(self, row: Dict[str, Any]) -> ScenarioIndicatorProxy:
        return ScenarioIndicatorProxy(
            id=row["id"],
            relevance=row["relevance"],
            direction=row["direction"],
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
