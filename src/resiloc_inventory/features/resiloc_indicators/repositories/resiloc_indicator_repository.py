"""Postgres repository for indicator templates."""

import logging
from typing import Any, Dict, List, Optional

from ....core.exceptions import NotFoundError
from ....utils.datetime import utc_now
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.resiloc_indicator import ResilocIndicator
from ..utils.queries import (
    RESILOC_INDICATOR_DELETE,
    RESILOC_INDICATOR_GET_BY_ID,
    RESILOC_INDICATOR_GET_BY_IDS,
    RESILOC_INDICATOR_INSERT,
    RESILOC_INDICATOR_LIST_ALL,
    RESILOC_INDICATOR_UPDATE,
    RESILOC_INDICATOR_WITH_PROXY_EXISTS,
)

logger = logging.getLogger(__name__)


class ResilocIndicatorDatabaseRepository:
    """Database repository for indicator templates."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    def _values(self, resiloc_indicator: ResilocIndicator) -> tuple:
        return (
            resiloc_indicator.name,
            resiloc_indicator.description,
            resiloc_indicator.context.value,
            resiloc_indicator.criteria.value,
            resiloc_indicator.dimension.value if resiloc_indicator.dimension else None,
            list(resiloc_indicator.tags),
            resiloc_indicator.status.value,
            resiloc_indicator.visibility.value,
            list(resiloc_indicator.resiloc_proxy_ids),
        )

    @handle_database_errors("create resiloc indicator")
    async def create(self, resiloc_indicator: ResilocIndicator) -> ResilocIndicator:
        await self._db.execute_command(
            self._q(RESILOC_INDICATOR_INSERT),
            resiloc_indicator.id, *self._values(resiloc_indicator),
            resiloc_indicator.date_created, resiloc_indicator.date_modified,
        )
        logger.info(f"Created resiloc indicator {resiloc_indicator.id} '{resiloc_indicator.name}'")
        return resiloc_indicator

    @handle_database_errors("get resiloc indicator")
    async def get_by_id(self, resiloc_indicator_id: str) -> Optional[ResilocIndicator]:
        row = await self._db.execute_fetchrow(self._q(RESILOC_INDICATOR_GET_BY_ID), resiloc_indicator_id)
        return self._map_row_to_resiloc_indicator(row) if row else None

    @handle_database_errors("get resiloc indicators")
    async def get_by_ids(self, resiloc_indicator_ids: List[str]) -> List[ResilocIndicator]:
        rows = await self._db.execute_query(self._q(RESILOC_INDICATOR_GET_BY_IDS), list(resiloc_indicator_ids))
        return [self._map_row_to_resiloc_indicator(row) for row in rows]

    @handle_database_errors("list resiloc indicators")
    async def find_all(self) -> List[ResilocIndicator]:
        rows = await self._db.execute_query(self._q(RESILOC_INDICATOR_LIST_ALL))
        return [self._map_row_to_resiloc_indicator(row) for row in rows]

    @handle_database_errors("update resiloc indicator")
    async def update(self, resiloc_indicator: ResilocIndicator) -> ResilocIndicator:
        resiloc_indicator.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(RESILOC_INDICATOR_UPDATE),
            resiloc_indicator.id, *self._values(resiloc_indicator), resiloc_indicator.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"Resiloc indicator {resiloc_indicator.id} does not exist")
        return resiloc_indicator

    @handle_database_errors("delete resiloc indicator")
    async def delete(self, resiloc_indicator_id: str) -> bool:
        status = await self._db.execute_command(self._q(RESILOC_INDICATOR_DELETE), resiloc_indicator_id)
        return affected_rows(status) > 0

    @handle_database_errors("check resiloc proxy links")
    async def exists_with_resiloc_proxy(self, resiloc_proxy_id: str) -> bool:
        return bool(await self._db.execute_fetchval(self._q(RESILOC_INDICATOR_WITH_PROXY_EXISTS), resiloc_proxy_id))

    def _map_row_to_resiloc_indicator(self, row: Dict[str, Any]) -> ResilocIndicator:
        """Map database row to ResilocIndicator entity."""
        return ResilocIndicator(
            id=row["id"],
            name=row["name"],
            description=row.get("description") or "",
            context=row["context"],
            criteria=row["criteria"],
            dimension=row.get("dimension"),
            tags=list(row.get("tags") or []),
            status=row["status"],
            visibility=row["visibility"],
            resiloc_proxy_ids=list(row.get("resiloc_proxy_ids") or []),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
