"""Tests for the Postgres user repository against a mocked database."""

from datetime import datetime, timezone
from unittest.mock import call

import pytest

from resiloc_inventory.core.exceptions import NotFoundError
from resiloc_inventory.features.users.entities.user import ResilocServiceRole, User, UserRole
from resiloc_inventory.features.users.repositories.user_repository import UserDatabaseRepository
from resiloc_inventory.features.users.utils.queries import (
    ROLES_ADD,
    ROLES_REMOVE_ONE,
    ROLES_SET,
    USER_ID_BY_USERNAME,
)

SCHEMA = "inventory"
CREATED = datetime(2021, 1, 1, tzinfo=timezone.utc)


def user_row(**overrides):
    row = {
        "id": "u1",
        "username": "alice",
        "email": "alice@example.org",
        "password_hash": "$argon2id$hash",
        "is_admin": False,
        "resiloc_service_role": None,
        "user_roles": {"c1": ["citizen", "local_manager"], "c2": ["citizen"]},
        "first_name": "Alice",
        "last_name": "",
        "phone": None,
        "is_active": True,
        "date_created": CREATED,
        "date_modified": CREATED,
    }
    row.update(overrides)
    return row


class TestUserRoleStorage:
    @pytest.fixture
    def repository(self, mock_database):
        mock_database.execute_fetchval.return_value = "u1"
        return UserDatabaseRepository(mock_database, SCHEMA)

    @pytest.mark.asyncio
    async def test_set_roles_replaces_the_community_row(self, repository, mock_database):
        await repository.set_roles("alice", "c1", [UserRole.CITIZEN, "resilience_expert"])

        mock_database.execute_fetchval.assert_awaited_once_with(
            USER_ID_BY_USERNAME.format(schema=SCHEMA), "alice"
        )
        mock_database.execute_command.assert_awaited_once_with(
            ROLES_SET.format(schema=SCHEMA), "u1", "c1", ["citizen", "resilience_expert"]
        )
        query = mock_database.execute_command.call_args[0][0]
        assert "ON CONFLICT (user_id, community_id) DO UPDATE SET roles = EXCLUDED.roles" in query

    @pytest.mark.asyncio
    async def test_add_roles_merges_without_duplicates(self, repository, mock_database):
        await repository.add_roles("alice", "c1", [UserRole.LOCAL_MANAGER])

        query, user_id, community_id, roles = mock_database.execute_command.call_args[0]
        assert query == ROLES_ADD.format(schema=SCHEMA)
        assert "SELECT DISTINCT unnest(inventory.user_community_roles.roles || EXCLUDED.roles)" in query
        assert (user_id, community_id, roles) == ("u1", "c1", ["local_manager"])

    @pytest.mark.asyncio
    async def test_remove_role_pulls_one_value(self, repository, mock_database):
        await repository.remove_role("alice", "c1", UserRole.RESILIENCE_EXPERT)

        mock_database.execute_command.assert_awaited_once_with(
            ROLES_REMOVE_ONE.format(schema=SCHEMA), "u1", "c1", "resilience_expert"
        )
        assert "array_remove(roles, $3)" in mock_database.execute_command.call_args[0][0]

    @pytest.mark.asyncio
    async def test_clear_roles_deletes_the_community_row(self, repository, mock_database):
        await repository.clear_roles("alice", "c1")

        query, user_id, community_id = mock_database.execute_command.call_args[0]
        assert query.startswith("DELETE FROM inventory.user_community_roles")
        assert (user_id, community_id) == ("u1", "c1")

    @pytest.mark.asyncio
    async def test_unknown_username(self, repository, mock_database):
        mock_database.execute_fetchval.return_value = None

        with pytest.raises(NotFoundError):
            await repository.set_roles("nobody", "c1", [UserRole.CITIZEN])
        mock_database.execute_command.assert_not_called()


class TestUserDatabaseRepository:
    @pytest.fixture
    def repository(self, mock_database):
        return UserDatabaseRepository(mock_database, SCHEMA)

    @pytest.mark.asyncio
    async def test_create_writes_user_and_roles_in_one_transaction(self, repository, mock_database):
        user = User(
            username="alice",
            email="alice@example.org",
            user_roles={"c1": {UserRole.CITIZEN}, "c2": {UserRole.CITIZEN}},
        )

        await repository.create(user)

        mock_database.transaction.assert_called_once_with()
        calls = mock_database.tx.execute_command.call_args_list
        assert "INSERT INTO inventory.users" in calls[0][0][0]
        assert calls[0][0][1:3] == (user.id, "alice")
        assert calls[1:] == [
            call(ROLES_SET.format(schema=SCHEMA), user.id, "c1", ["citizen"]),
            call(ROLES_SET.format(schema=SCHEMA), user.id, "c2", ["citizen"]),
        ]
        mock_database.execute_command.assert_not_called()

    @pytest.mark.asyncio
    async def test_row_maps_roles_per_community(self, repository, mock_database):
        mock_database.execute_fetchrow.return_value = user_row()

        user = await repository.get_by_username("alice")

        assert mock_database.execute_fetchrow.call_args[0][1] == "alice"
        assert user.roles_in("c1") == {UserRole.CITIZEN, UserRole.LOCAL_MANAGER}
        assert user.roles_in("c2") == {UserRole.CITIZEN}
        assert user.follows("c2")
        assert not user.follows("c3")
        assert user.phone == ""
        assert user.resiloc_service_role is None

    @pytest.mark.asyncio
    async def test_service_account_row(self, repository, mock_database):
        mock_database.execute_query.return_value = [
            user_row(username="semantic", resiloc_service_role="semantic_layer", user_roles={})
        ]

        users = await repository.find_all()

        assert users[0].resiloc_service_role == ResilocServiceRole.SEMANTIC_LAYER
        assert users[0].user_roles == {}

    @pytest.mark.asyncio
    async def test_update_of_missing_user(self, repository, mock_database):
        mock_database.execute_command.return_value = "UPDATE 0"

        with pytest.raises(NotFoundError):
            await repository.update(User(username="ghost", email="ghost@example.org"))
