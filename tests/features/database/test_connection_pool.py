"""Tests for the asyncpg pool wiring and the transaction executor."""

import json
from unittest.mock import AsyncMock, MagicMock, call

import asyncpg
import pytest

from resiloc_inventory.core.exceptions import DatabaseError
from resiloc_inventory.features.database.repositories.connection_pool import (
    AsyncConnectionPool,
    ConnectionExecutor,
    PostgresDatabase,
    _init_connection,
)


class TestJsonCodecs:
    @pytest.mark.asyncio
    async def test_json_and_jsonb_codecs_are_registered(self):
        conn = AsyncMock()

        await _init_connection(conn)

        assert conn.set_type_codec.await_args_list == [
            call("json", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"),
            call("jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"),
        ]

    @pytest.mark.asyncio
    async def test_jsonb_decoder_returns_python_objects(self):
        conn = AsyncMock()

        await _init_connection(conn)

        jsonb = conn.set_type_codec.await_args_list[1].kwargs
        assert jsonb["decoder"]('{"c1": ["citizen"]}') == {"c1": ["citizen"]}
        assert json.loads(jsonb["encoder"]({"description": "Delta"})) == {"description": "Delta"}


class TestAsyncConnectionPool:
    @pytest.mark.asyncio
    async def test_pool_is_created_once_with_codec_init(self, mocker, settings):
        create_pool = mocker.patch(
            "resiloc_inventory.features.database.repositories.connection_pool.asyncpg.create_pool",
            new=AsyncMock(return_value=MagicMock()),
        )
        pool = AsyncConnectionPool(settings)

        async with pool.connection():
            pass
        async with pool.connection():
            pass

        create_pool.assert_awaited_once()
        kwargs = create_pool.await_args.kwargs
        assert kwargs["init"] is _init_connection
        assert kwargs["dsn"] == settings.database_url
        assert kwargs["max_size"] == settings.db_pool_max_size

    @pytest.mark.asyncio
    async def test_connection_refused(self, mocker, settings):
        mocker.patch(
            "resiloc_inventory.features.database.repositories.connection_pool.asyncpg.create_pool",
            new=AsyncMock(side_effect=OSError("connection refused")),
        )

        with pytest.raises(DatabaseError):
            async with AsyncConnectionPool(settings).connection():
                pass

    @pytest.mark.asyncio
    async def test_closing_pool_rejects_connections(self, settings):
        pool = AsyncConnectionPool(settings)
        await pool.close()

        with pytest.raises(DatabaseError, match="closing"):
            async with pool.connection():
                pass
        assert not await pool.is_healthy()


class TestPostgresDatabase:
    @pytest.fixture
    def conn(self):
        conn = MagicMock()
        conn.execute = AsyncMock(return_value="UPDATE 1")
        conn.fetchrow = AsyncMock(return_value={"id": "c1"})
        conn.transaction.return_value.__aexit__.return_value = False
        return conn

    @pytest.fixture
    def database(self, conn):
        pool = MagicMock()
        pool.connection.return_value.__aenter__.return_value = conn
        pool.connection.return_value.__aexit__.return_value = False
        return PostgresDatabase(pool)

    @pytest.mark.asyncio
    async def test_transaction_runs_on_one_connection(self, database, conn):
        async with database.transaction() as tx:
            assert isinstance(tx, ConnectionExecutor)
            await tx.execute_command("UPDATE a", 1)
            await tx.execute_command("UPDATE b", 2)

        database.pool.connection.assert_called_once_with()
        conn.transaction.assert_called_once_with()
        assert conn.execute.await_args_list == [call("UPDATE a", 1), call("UPDATE b", 2)]

    @pytest.mark.asyncio
    async def test_fetchrow_returns_dict(self, database):
        assert await database.execute_fetchrow("SELECT 1") == {"id": "c1"}

    @pytest.mark.asyncio
    async def test_error_inside_transaction_propagates(self, database, conn):
        conn.execute.side_effect = asyncpg.PostgresError("deadlock detected")

        with pytest.raises(asyncpg.PostgresError):
            async with database.transaction() as tx:
                await tx.execute_command("UPDATE a")

        exit_args = conn.transaction.return_value.__aexit__.await_args[0]
        assert exit_args[0] is asyncpg.PostgresError
