"""Postgres repository for static proxies."""

import logging
from typing import Any, Dict, List, Optional

from ....core.exceptions import NotFoundError
from ....utils.datetime import utc_now
from ...catalog.entities.enums import Visibility
from ...catalog.entities.metadata import ProxyMetadata
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.static_proxy import StaticProxy
from ..utils.queries import (
    STATIC_PROXY_DELETE,
    STATIC_PROXY_DELETE_MANY,
    STATIC_PROXY_GET_BY_ID,
    STATIC_PROXY_GET_BY_IDS,
    STATIC_PROXY_INSERT,
    STATIC_PROXY_LIST_ALL,
    STATIC_PROXY_LIST_BY_VISIBILITY,
    STATIC_PROXY_UPDATE,
)

logger = logging.getLogger(__name__)


class StaticProxyDatabaseRepository:
    """Database repository for static proxies."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    @handle_database_errors("create static proxy")
    async def create(self, static_proxy: StaticProxy) -> StaticProxy:
        await self._db.execute_command(
            self._q(STATIC_PROXY_INSERT),
            static_proxy.id, static_proxy.type.value, static_proxy.value,
            static_proxy.min_target, static_proxy.max_target, static_proxy.visibility.value,
            static_proxy.metadata.to_dict(), static_proxy.resiloc_proxy_id,
            static_proxy.date_created, static_proxy.date_modified,
        )
        logger.debug(f"Created static proxy {static_proxy.id} of resiloc proxy {static_proxy.resiloc_proxy_id}")
        return static_proxy

    @handle_database_errors("get static proxy")
    async def get_by_id(self, static_proxy_id: str) -> Optional[StaticProxy]:
        row = await self._db.execute_fetchrow(self._q(STATIC_PROXY_GET_BY_ID), static_proxy_id)
        return self._map_row_to_static_proxy(row) if row else None

    @handle_database_errors("get static proxies")
    async def get_by_ids(self, static_proxy_ids: List[str]) -> List[StaticProxy]:
        rows = await self._db.execute_query(self._q(STATIC_PROXY_GET_BY_IDS), list(static_proxy_ids))
        return [self._map_row_to_static_proxy(row) for row in rows]

    @handle_database_errors("list static proxies")
    async def find_all(self) -> List[StaticProxy]:
        rows = await self._db.execute_query(self._q(STATIC_PROXY_LIST_ALL))
        return [self._map_row_to_static_proxy(row) for row in rows]

    @handle_database_errors("list static proxies by visibility")
    async def find_by_visibility(self, visibility: Visibility) -> List[StaticProxy]:
        rows = await self._db.execute_query(self._q(STATIC_PROXY_LIST_BY_VISIBILITY), Visibility(visibility).value)
        return [self._map_row_to_static_proxy(row) for row in rows]

    @handle_database_errors("update static proxy")
    async def update(self, static_proxy: StaticProxy) -> StaticProxy:
        static_proxy.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(STATIC_PROXY_UPDATE),
            static_proxy.id, static_proxy.value, static_proxy.min_target, static_proxy.max_target,
            static_proxy.visibility.value, static_proxy.metadata.to_dict(), static_proxy.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"Static proxy {static_proxy.id} does not exist")
        return static_proxy

    @handle_database_errors("delete static proxy")
    async def delete(self, static_proxy_id: str) -> bool:
        status = await self._db.execute_command(self._q(STATIC_PROXY_DELETE), static_proxy_id)
        return affected_rows(status) > 0

    @handle_database_errors("delete static proxies")
    async def delete_many(self, static_proxy_ids: List[str]) -> int:
        if not static_proxy_ids:
            return 0
        status = await self._db.execute_command(self._q(STATIC_PROXY_DELETE_MANY), list(static_proxy_ids))
        return affected_rows(status)

    def _map_row_to_static_proxy(self, row: Dict[str, Any]) -> StaticProxy:
        """Map database row to StaticProxy entity."""
        return StaticProxy(
            id=row["id"],
            type=row["type"],
            value=row.get("value"),
            min_target=row.get("min_target"),
            max_target=row.get("max_target"),
            visibility=row["visibility"],
            metadata=ProxyMetadata.from_dict(row.get("metadata")),
            resiloc_proxy_id=row["resiloc_proxy_id"],
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
