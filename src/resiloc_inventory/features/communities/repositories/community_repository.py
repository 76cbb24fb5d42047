"""Postgres repository for communities."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....utils.datetime import utc_now
from ...catalog.entities.enums import Visibility
from ...database.entities.protocols import DatabaseRepository
from ...database.utils.error_handling import handle_database_errors
from ...database.utils.results import affected_rows
from ..entities.community import Community, CommunityMetadata, CommunityRelation, CommunitySetField
from ..utils.queries import (
    COMMUNITY_ADD_TO_SET,
    COMMUNITY_DELETE,
    COMMUNITY_GET_BY_ID,
    COMMUNITY_GET_BY_IDS,
    COMMUNITY_ID_BY_SCENARIO,
    COMMUNITY_ID_BY_SET_MEMBER,
    COMMUNITY_ID_BY_STATIC_PROXY,
    COMMUNITY_INSERT,
    COMMUNITY_LIST_ALL,
    COMMUNITY_LIST_FOLLOWABLE,
    COMMUNITY_LIST_FOLLOWED,
    COMMUNITY_LIST_PENDING_DELETION,
    COMMUNITY_MARK_DELETION,
    COMMUNITY_PULL_FROM_ALL,
    COMMUNITY_PULL_FROM_SET,
    COMMUNITY_UPDATE,
    RESILOC_PROXY_IN_USE,
    RESILOC_SCENARIO_IN_USE,
    SCENARIO_DELETE,
    SCENARIO_UPSERT,
    STATIC_PROXY_DELETE,
    STATIC_PROXY_UPSERT,
)

logger = logging.getLogger(__name__)


class CommunityDatabaseRepository:
    """Database repository for communities, their graph and association maps."""

    def __init__(self, database_repository: DatabaseRepository, schema: str):
        self._db = database_repository
        self._schema = schema

    def _q(self, query: str, **columns: str) -> str:
        return query.format(schema=self._schema, **columns)

    @handle_database_errors("create community")
    async def create(self, community: Community) -> Community:
        await self._db.execute_command(
            self._q(COMMUNITY_INSERT),
            community.id, community.name, community.visibility.value, community.metadata.to_dict(),
            community.users, community.parents, community.peers, community.children,
            community.requested_proxies, community.requested_indicators, community.snapshots,
            community.date_created, community.date_modified,
        )
        logger.info(f"Created community {community.id} '{community.name}'")
        return community

    @handle_database_errors("get community")
    async def get_by_id(self, community_id: str) -> Optional[Community]:
        row = await self._db.execute_fetchrow(self._q(COMMUNITY_GET_BY_ID), community_id)
        return self._map_row_to_community(row) if row else None

    @handle_database_errors("get communities")
    async def get_by_ids(self, community_ids: List[str]) -> List[Community]:
        rows = await self._db.execute_query(self._q(COMMUNITY_GET_BY_IDS), list(community_ids))
        return [self._map_row_to_community(row) for row in rows]

    @handle_database_errors("list communities")
    async def find_all(self) -> List[Community]:
        rows = await self._db.execute_query(self._q(COMMUNITY_LIST_ALL))
        return [self._map_row_to_community(row) for row in rows]

    @handle_database_errors("update community")
    async def update(self, community: Community) -> Community:
        community.date_modified = utc_now()
        await self._db.execute_command(
            self._q(COMMUNITY_UPDATE),
            community.id, community.name, community.visibility.value,
            community.metadata.to_dict(), community.date_modified,
        )
        return community

    @handle_database_errors("delete community")
    async def delete(self, community_id: str) -> bool:
        status = await self._db.execute_command(self._q(COMMUNITY_DELETE), community_id)
        return affected_rows(status) > 0

    @handle_database_errors("add to community set")
    async def add_to_set(self, community_id: str, set_field: CommunitySetField, value: str) -> None:
        column = CommunitySetField(set_field).value
        await self._db.execute_command(self._q(COMMUNITY_ADD_TO_SET, column=column), community_id, value)

    @handle_database_errors("pull from community set")
    async def pull_from_set(self, community_id: str, set_field: CommunitySetField, value: str) -> None:
        column = CommunitySetField(set_field).value
        await self._db.execute_command(self._q(COMMUNITY_PULL_FROM_SET, column=column), community_id, value)

    @handle_database_errors("pull from community sets")
    async def pull_from_all(self, set_field: CommunitySetField, value: str) -> int:
        column = CommunitySetField(set_field).value
        status = await self._db.execute_command(self._q(COMMUNITY_PULL_FROM_ALL, column=column), value)
        return affected_rows(status)

    @handle_database_errors("link communities")
    async def link(self, community_id: str, relation: CommunityRelation, other_id: str) -> None:
        relation = CommunityRelation(relation)
        async with self._db.transaction() as tx:
            await tx.execute_command(
                self._q(COMMUNITY_ADD_TO_SET, column=relation.value), community_id, other_id
            )
            await tx.execute_command(
                self._q(COMMUNITY_ADD_TO_SET, column=relation.reverse.value), other_id, community_id
            )

    @handle_database_errors("unlink communities")
    async def unlink(self, community_id: str, relation: CommunityRelation, other_id: str) -> None:
        relation = CommunityRelation(relation)
        async with self._db.transaction() as tx:
            await tx.execute_command(
                self._q(COMMUNITY_PULL_FROM_SET, column=relation.value), community_id, other_id
            )
            await tx.execute_command(
                self._q(COMMUNITY_PULL_FROM_SET, column=relation.reverse.value), other_id, community_id
            )

    @handle_database_errors("set community static proxy")
    async def set_static_proxy(self, community_id: str, resiloc_proxy_id: str, static_proxy_id: str) -> None:
        await self._db.execute_command(self._q(STATIC_PROXY_UPSERT), community_id, resiloc_proxy_id, static_proxy_id)

    @handle_database_errors("unset community static proxy")
    async def unset_static_proxy(self, community_id: str, resiloc_proxy_id: str) -> None:
        await self._db.execute_command(self._q(STATIC_PROXY_DELETE), community_id, resiloc_proxy_id)

    @handle_database_errors("set community scenario")
    async def set_scenario(self, community_id: str, resiloc_scenario_id: str, scenario_id: str) -> None:
        await self._db.execute_command(self._q(SCENARIO_UPSERT), community_id, resiloc_scenario_id, scenario_id)

    @handle_database_errors("unset community scenario")
    async def unset_scenario(self, community_id: str, resiloc_scenario_id: str) -> None:
        await self._db.execute_command(self._q(SCENARIO_DELETE), community_id, resiloc_scenario_id)

    @handle_database_errors("mark community deletion")
    async def mark_deletion_started(self, community_id: str, started_at: datetime) -> None:
        await self._db.execute_command(self._q(COMMUNITY_MARK_DELETION), community_id, started_at)

    @handle_database_errors("list pending community deletions")
    async def find_pending_deletions(self) -> List[Community]:
        rows = await self._db.execute_query(self._q(COMMUNITY_LIST_PENDING_DELETION))
        return [self._map_row_to_community(row) for row in rows]

    @handle_database_errors("find community of static proxy")
    async def find_id_by_static_proxy(self, static_proxy_id: str) -> Optional[str]:
        return await self._db.execute_fetchval(self._q(COMMUNITY_ID_BY_STATIC_PROXY), static_proxy_id)

    async def _find_id_by_set_member(self, set_field: CommunitySetField, value: str) -> Optional[str]:
        query = self._q(COMMUNITY_ID_BY_SET_MEMBER, column=CommunitySetField(set_field).value)
        return await self._db.execute_fetchval(query, value)

    @handle_database_errors("find community of snapshot")
    async def find_id_by_snapshot(self, snapshot_id: str) -> Optional[str]:
        return await self._find_id_by_set_member(CommunitySetField.SNAPSHOTS, snapshot_id)

    @handle_database_errors("find community of scenario")
    async def find_id_by_scenario(self, scenario_id: str) -> Optional[str]:
        return await self._db.execute_fetchval(self._q(COMMUNITY_ID_BY_SCENARIO), scenario_id)

    @handle_database_errors("find community of requested proxy")
    async def find_id_by_requested_proxy(self, resiloc_proxy_id: str) -> Optional[str]:
        return await self._find_id_by_set_member(CommunitySetField.REQUESTED_PROXIES, resiloc_proxy_id)

    @handle_database_errors("find community of requested indicator")
    async def find_id_by_requested_indicator(self, resiloc_indicator_id: str) -> Optional[str]:
        return await self._find_id_by_set_member(CommunitySetField.REQUESTED_INDICATORS, resiloc_indicator_id)

    @handle_database_errors("check resiloc proxy usage")
    async def is_resiloc_proxy_used(self, resiloc_proxy_id: str) -> bool:
        return bool(await self._db.execute_fetchval(self._q(RESILOC_PROXY_IN_USE), resiloc_proxy_id))

    @handle_database_errors("check resiloc scenario usage")
    async def is_resiloc_scenario_used(self, resiloc_scenario_id: str) -> bool:
        return bool(await self._db.execute_fetchval(self._q(RESILOC_SCENARIO_IN_USE), resiloc_scenario_id))

    @handle_database_errors("list followed communities")
    async def find_followed_by(self, user_id: str) -> List[Community]:
        rows = await self._db.execute_query(self._q(COMMUNITY_LIST_FOLLOWED), user_id)
        return [self._map_row_to_community(row) for row in rows]

    @handle_database_errors("list followable communities")
    async def find_followable_by(self, user_id: str) -> List[Community]:
        rows = await self._db.execute_query(self._q(COMMUNITY_LIST_FOLLOWABLE), user_id)
        return [self._map_row_to_community(row) for row in rows]

    def _map_row_to_community(self, row: Dict[str, Any]) -> Community:
        """Map database row to Community entity."""
        return Community(
            id=row["id"],
            name=row["name"],
            visibility=Visibility(row["visibility"]),
            metadata=CommunityMetadata.from_dict(row.get("metadata")),
            users=list(row.get("users") or []),
            parents=list(row.get("parents") or []),
            peers=list(row.get("peers") or []),
            children=list(row.get("children") or []),
            static_proxies=dict(row.get("static_proxies") or {}),
            scenarios=dict(row.get("scenarios") or {}),
            requested_proxies=list(row.get("requested_proxies") or []),
            requested_indicators=list(row.get("requested_indicators") or []),
            snapshots=list(row.get("snapshots") or []),
            deletion_started_at=row.get("deletion_started_at"),
            date_created=row["date_created"],
            date_modified=row["date_modified"],
        )
