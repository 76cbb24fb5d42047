"""Tests for the Postgres community repository against a mocked database."""

from datetime import datetime, timezone
from unittest.mock import call

import asyncpg
import pytest

from resiloc_inventory.core.exceptions import DatabaseError, UniqueConstraintError
from resiloc_inventory.features.catalog.entities.enums import Visibility
from resiloc_inventory.features.communities.entities.community import (
    Community,
    CommunityRelation,
    CommunitySetField,
)
from resiloc_inventory.features.communities.repositories.community_repository import CommunityDatabaseRepository
from resiloc_inventory.features.communities.utils.queries import (
    COMMUNITY_ADD_TO_SET,
    COMMUNITY_MARK_DELETION,
    COMMUNITY_PULL_FROM_SET,
)

SCHEMA = "inventory"
CREATED = datetime(2021, 1, 1, tzinfo=timezone.utc)


def community_row(**overrides):
    row = {
        "id": "c1",
        "name": "Riverside",
        "visibility": "community",
        "metadata": {"description": "Delta towns", "geometry": ""},
        "users": ["u1", "u2"],
        "parents": ["c0"],
        "peers": [],
        "children": None,
        "static_proxies": {"p1": "sp1"},
        "scenarios": {},
        "requested_proxies": ["p2"],
        "requested_indicators": [],
        "snapshots": ["s1"],
        "deletion_started_at": None,
        "date_created": CREATED,
        "date_modified": CREATED,
    }
    row.update(overrides)
    return row


class TestCommunityDatabaseRepository:
    @pytest.fixture
    def repository(self, mock_database):
        return CommunityDatabaseRepository(mock_database, SCHEMA)

    @pytest.mark.asyncio
    async def test_link_writes_both_endpoints_in_one_transaction(self, repository, mock_database):
        await repository.link("c1", CommunityRelation.PARENTS, "c2")

        mock_database.transaction.assert_called_once_with()
        assert mock_database.tx.execute_command.call_args_list == [
            call(COMMUNITY_ADD_TO_SET.format(schema=SCHEMA, column="parents"), "c1", "c2"),
            call(COMMUNITY_ADD_TO_SET.format(schema=SCHEMA, column="children"), "c2", "c1"),
        ]
        mock_database.execute_command.assert_not_called()

    @pytest.mark.asyncio
    async def test_unlink_peers_pulls_from_both_peer_lists(self, repository, mock_database):
        await repository.unlink("c1", "peers", "c2")

        mock_database.transaction.assert_called_once_with()
        assert mock_database.tx.execute_command.call_args_list == [
            call(COMMUNITY_PULL_FROM_SET.format(schema=SCHEMA, column="peers"), "c1", "c2"),
            call(COMMUNITY_PULL_FROM_SET.format(schema=SCHEMA, column="peers"), "c2", "c1"),
        ]

    @pytest.mark.asyncio
    async def test_link_with_unknown_relation_writes_nothing(self, repository, mock_database):
        with pytest.raises(ValueError):
            await repository.link("c1", "siblings", "c2")

        mock_database.transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_to_set_substitutes_column(self, repository, mock_database):
        await repository.add_to_set("c1", CommunitySetField.SNAPSHOTS, "s2")

        query, community_id, value = mock_database.execute_command.call_args[0]
        assert query == COMMUNITY_ADD_TO_SET.format(schema=SCHEMA, column="snapshots")
        assert "UPDATE inventory.communities SET snapshots = array_append(snapshots, $2)" in query
        assert "NOT ($2 = ANY(snapshots))" in query
        assert "{" not in query
        assert (community_id, value) == ("c1", "s2")

    @pytest.mark.asyncio
    async def test_pull_from_set_substitutes_column(self, repository, mock_database):
        await repository.pull_from_set("c1", "requested_proxies", "p2")

        query, community_id, value = mock_database.execute_command.call_args[0]
        assert "SET requested_proxies = array_remove(requested_proxies, $2)" in query
        assert "inventory.communities" in query
        assert (community_id, value) == ("c1", "p2")

    @pytest.mark.asyncio
    async def test_mark_deletion_started(self, repository, mock_database):
        started_at = datetime(2021, 5, 1, 12, 30, tzinfo=timezone.utc)

        await repository.mark_deletion_started("c1", started_at)

        mock_database.execute_command.assert_awaited_once_with(
            COMMUNITY_MARK_DELETION.format(schema=SCHEMA), "c1", started_at
        )
        assert "SET deletion_started_at = $2 WHERE id = $1" in mock_database.execute_command.call_args[0][0]

    @pytest.mark.asyncio
    async def test_get_by_id_maps_row(self, repository, mock_database):
        mock_database.execute_fetchrow.return_value = community_row()

        community = await repository.get_by_id("c1")

        assert mock_database.execute_fetchrow.call_args[0][1] == "c1"
        assert "inventory.communities" in mock_database.execute_fetchrow.call_args[0][0]
        assert community.visibility == Visibility.COMMUNITY
        assert community.metadata.description == "Delta towns"
        assert community.users == ["u1", "u2"]
        assert community.children == []
        assert community.static_proxies == {"p1": "sp1"}
        assert community.snapshots == ["s1"]
        assert not community.is_being_deleted

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, repository, mock_database):
        mock_database.execute_fetchrow.return_value = None

        assert await repository.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_pending_deletions_carry_marker(self, repository, mock_database):
        started_at = datetime(2021, 5, 1, tzinfo=timezone.utc)
        mock_database.execute_query.return_value = [community_row(deletion_started_at=started_at)]

        pending = await repository.find_pending_deletions()

        assert [community.deletion_started_at for community in pending] == [started_at]
        assert pending[0].is_being_deleted

    @pytest.mark.asyncio
    async def test_delete_reports_affected_rows(self, repository, mock_database):
        mock_database.execute_command.return_value = "DELETE 0"

        assert await repository.delete("c1") is False

    @pytest.mark.asyncio
    async def test_create_passes_visibility_value(self, repository, mock_database):
        community = Community(name="Riverside", visibility=Visibility.PUBLIC)

        await repository.create(community)

        args = mock_database.execute_command.call_args[0]
        assert "INSERT INTO inventory.communities" in args[0]
        assert args[1:4] == (community.id, "Riverside", "public")

    @pytest.mark.asyncio
    async def test_unique_violation_is_translated(self, repository, mock_database):
        mock_database.execute_command.side_effect = asyncpg.UniqueViolationError("duplicate key")

        with pytest.raises(UniqueConstraintError):
            await repository.create(Community(name="Riverside"))

    @pytest.mark.asyncio
    async def test_transaction_failure_is_a_database_error(self, repository, mock_database):
        mock_database.tx.execute_command.side_effect = [None, asyncpg.PostgresError("connection lost")]

        with pytest.raises(DatabaseError):
            await repository.link("c1", CommunityRelation.CHILDREN, "c2")
