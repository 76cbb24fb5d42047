"""Postgres repository for proxy templates."""

import logging
from typing import Any, Dict, List, Optional

from ....core.exceptions import NotFoundError
from ....utils.datetime import utc_now
from ...catalog.entities.metadata import ProxyMetadata
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.resiloc_proxy import ResilocProxy, UnitOfMeasurement
from ..utils.queries import (
    RESILOC_PROXY_DELETE,
    RESILOC_PROXY_GET_BY_ID,
    RESILOC_PROXY_GET_BY_IDS,
    RESILOC_PROXY_INSERT,
    RESILOC_PROXY_LIST_ALL,
    RESILOC_PROXY_UPDATE,
)

logger = logging.getLogger(__name__)


class ResilocProxyDatabaseRepository:
    """Database repository for proxy templates."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    def _values(self, resiloc_proxy: ResilocProxy) -> tuple:
        return (
            resiloc_proxy.name,
            resiloc_proxy.description,
            resiloc_proxy.type,
            list(resiloc_proxy.tags),
            resiloc_proxy.status.value,
            resiloc_proxy.visibility.value,
            [unit.to_dict() for unit in resiloc_proxy.unit_of_measurement],
            resiloc_proxy.metadata.to_dict(),
        )

    @handle_database_errors("create resiloc proxy")
    async def create(self, resiloc_proxy: ResilocProxy) -> ResilocProxy:
        await self._db.execute_command(
            self._q(RESILOC_PROXY_INSERT),
            resiloc_proxy.id, *self._values(resiloc_proxy),
            resiloc_proxy.date_created, resiloc_proxy.date_modified,
        )
        logger.info(f"Created resiloc proxy {resiloc_proxy.id} '{resiloc_proxy.name}'")
        return resiloc_proxy

    @handle_database_errors("get resiloc proxy")
    async def get_by_id(self, resiloc_proxy_id: str) -> Optional[ResilocProxy]:
        row = await self._db.execute_fetchrow(self._q(RESILOC_PROXY_GET_BY_ID), resiloc_proxy_id)
        return self._map_row_to_resiloc_proxy(row) if row else None

    @handle_database_errors("get resiloc proxies")
    async def get_by_ids(self, resiloc_proxy_ids: List[str]) -> List[ResilocProxy]:
        rows = await self._db.execute_query(self._q(RESILOC_PROXY_GET_BY_IDS), list(resiloc_proxy_ids))
        return [self._map_row_to_resiloc_proxy(row) for row in rows]

    @handle_database_errors("list resiloc proxies")
    async def find_all(self) -> List[ResilocProxy]:
        rows = await self._db.execute_query(self._q(RESILOC_PROXY_LIST_ALL))
        return [self._map_row_to_resiloc_proxy(row) for row in rows]

    @handle_database_errors("update resiloc proxy")
    async def update(self, resiloc_proxy: ResilocProxy) -> ResilocProxy:
        resiloc_proxy.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(RESILOC_PROXY_UPDATE),
            resiloc_proxy.id, *self._values(resiloc_proxy), resiloc_proxy.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"Resiloc proxy id {resiloc_proxy.id} does not exist")
        return resiloc_proxy

    @handle_database_errors("delete resiloc proxy")
    async def delete(self, resiloc_proxy_id: str) -> bool:
        status = await self._db.execute_command(self._q(RESILOC_PROXY_DELETE), resiloc_proxy_id)
        return affected_rows(status) > 0

    def _map_row_to_resiloc_proxy(self, row: Dict[str, Any]) -> ResilocProxy:
        """Map database row to ResilocProxy entity."""
        return ResilocProxy(
            id=row["id"],
            name=row["name"],
            description=row.get("description") or "",
            type=row.get("type"),
            tags=list(row.get("tags") or []),
            status=row["status"],
            visibility=row["visibility"],
            unit_of_measurement=[
                UnitOfMeasurement.from_dict(unit) for unit in (row.get("unit_of_measurement") or [])
            ],
            metadata=ProxyMetadata.from_dict(row.get("metadata")),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
