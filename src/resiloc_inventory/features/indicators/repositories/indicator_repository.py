"""Postgres repository for indicator instances."""

import logging
from typing import Any, Dict, List, Optional

from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.indicator import Indicator
from ..utils.queries import (
    INDICATOR_DELETE,
    INDICATOR_FOR_TEMPLATE_EXISTS,
    INDICATOR_GET_BY_ID,
    INDICATOR_GET_BY_IDS,
    INDICATOR_INSERT,
)

logger = logging.getLogger(__name__)


class IndicatorDatabaseRepository:
    """Database repository for indicator instances."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    @handle_database_errors("create indicator")
    async def create(self, indicator: Indicator) -> Indicator:
        await self._db.execute_command(
            self._q(INDICATOR_INSERT),
            indicator.id, indicator.visibility.value, indicator.resiloc_indicator_id,
            list(indicator.static_proxy_ids), indicator.date_created, indicator.date_modified,
        )
        logger.debug(f"Created indicator {indicator.id} of resiloc indicator {indicator.resiloc_indicator_id}")
        return indicator

    @handle_database_errors("get indicator")
    async def get_by_id(self, indicator_id: str) -> Optional[Indicator]:
        row = await self._db.execute_fetchrow(self._q(INDICATOR_GET_BY_ID), indicator_id)
        return self._map_row_to_indicator(row) if row else None

    @handle_database_errors("get indicators")
    async def get_by_ids(self, indicator_ids: List[str]) -> List[Indicator]:
        rows = await self._db.execute_query(self._q(INDICATOR_GET_BY_IDS), list(indicator_ids))
        return [self._map_row_to_indicator(row) for row in rows]

    @handle_database_errors("delete indicator")
    async def delete(self, indicator_id: str) -> bool:
        status = await self._db.execute_command(self._q(INDICATOR_DELETE), indicator_id)
        return affected_rows(status) > 0

    @handle_database_errors("check indicator instances")
    async def exists_for_resiloc_indicator(self, resiloc_indicator_id: str) -> bool:
        return bool(await self._db.execute_fetchval(self._q(INDICATOR_FOR_TEMPLATE_EXISTS), resiloc_indicator_id))

    def _map_row_to_indicator(self, row: Dict[str, Any]) -> Indicator:
        return Indicator(
            id=row["id"],
            visibility=row["visibility"],
            resiloc_indicator_id=row["resiloc_indicator_id"],
            static_proxy_ids=list(row.get("static_proxy_ids") or []),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
