"""Postgres repository for snapshots."""

import logging
from typing import Any, Dict, List, Optional

from ....core.exceptions import NotFoundError
from ....utils.datetime import utc_now
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.snapshot import Snapshot
from ..utils.queries import (
    SNAPSHOT_DELETE,
    SNAPSHOT_GET_BY_ID,
    SNAPSHOT_GET_BY_IDS,
    SNAPSHOT_GET_BY_STATIC_PROXY,
    SNAPSHOT_INSERT,
    SNAPSHOT_UPDATE,
)

logger = logging.getLogger(__name__)


class SnapshotDatabaseRepository:
    """Database repository for snapshots."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    @handle_database_errors("create snapshot")
    async def create(self, snapshot: Snapshot) -> Snapshot:
        await self._db.execute_command(
            self._q(SNAPSHOT_INSERT),
            snapshot.id, snapshot.name, snapshot.type.value, snapshot.description,
            snapshot.visibility.value, snapshot.status.value, snapshot.date_submitted,
            list(snapshot.static_proxy_ids), snapshot.date_created, snapshot.date_modified,
        )
        logger.info(f"Created snapshot {snapshot.id} '{snapshot.name}'")
        return snapshot

    @handle_database_errors("get snapshot")
    async def get_by_id(self, snapshot_id: str) -> Optional[Snapshot]:
        row = await self._db.execute_fetchrow(self._q(SNAPSHOT_GET_BY_ID), snapshot_id)
        return self._map_row_to_snapshot(row) if row else None

    @handle_database_errors("get snapshots")
    async def get_by_ids(self, snapshot_ids: List[str]) -> List[Snapshot]:
        rows = await self._db.execute_query(self._q(SNAPSHOT_GET_BY_IDS), list(snapshot_ids))
        return [self._map_row_to_snapshot(row) for row in rows]

    @handle_database_errors("update snapshot")
    async def update(self, snapshot: Snapshot) -> Snapshot:
        snapshot.date_modified = utc_now()
        status = await self._db.execute_command(
            self._q(SNAPSHOT_UPDATE),
            snapshot.id, snapshot.name, snapshot.type.value, snapshot.description,
            snapshot.visibility.value, snapshot.status.value, snapshot.date_submitted,
            list(snapshot.static_proxy_ids), snapshot.date_modified,
        )
        if affected_rows(status) == 0:
            raise NotFoundError(f"Snapshot {snapshot.id} does not exist")
        return snapshot

    @handle_database_errors("delete snapshot")
    async def delete(self, snapshot_id: str) -> bool:
        status = await self._db.execute_command(self._q(SNAPSHOT_DELETE), snapshot_id)
        return affected_rows(status) > 0

    @handle_database_errors("find snapshot of static proxy")
    async def find_by_static_proxy(self, static_proxy_id: str) -> Optional[Snapshot]:
        row = await self._db.execute_fetchrow(self._q(SNAPSHOT_GET_BY_STATIC_PROXY), static_proxy_id)
        return self._map_row_to_snapshot(row) if row else None

    def _map_row_to_snapshot(self, row: Dict[str, Any]) -> Snapshot:
        """Map database row to Snapshot entity."""
        return Snapshot(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            description=row.get("description") or "",
            visibility=row["visibility"],
            status=row["status"],
            date_submitted=row.get("date_submitted"),
            static_proxy_ids=list(row.get("static_proxy_ids") or []),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
