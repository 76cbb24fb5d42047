"""asyncpg connection pool and the database repository built on it."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import asyncpg

from ....config.settings import InventorySettings
from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode json/jsonb columns into Python objects."""
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
        )


class AsyncConnectionPool:
    """Lazily created asyncpg pool."""

    def __init__(self, settings: InventorySettings):
        self._settings = settings
        self._pool: Optional[asyncpg.Pool] = None
        self._is_closing = False
        self._lock = asyncio.Lock()

    async def _create_pool(self) -> asyncpg.Pool:
        try:
            pool = await asyncpg.create_pool(
                dsn=self._settings.database_url,
                min_size=self._settings.db_pool_min_size,
                max_size=self._settings.db_pool_max_size,
                timeout=self._settings.db_pool_timeout,
                init=_init_connection,
            )
            logger.info(
                f"Created connection pool: min={self._settings.db_pool_min_size}, "
                f"max={self._settings.db_pool_max_size}"
            )
            return pool
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Failed to create connection pool: {e}")
            raise DatabaseError(f"Failed to create connection pool: {e}")

    async def _ensure_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            async with self._lock:
                if self._pool is None:  # Double-check
                    self._pool = await self._create_pool()
        return self._pool

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection for the duration of the block."""
        if self._is_closing:
            raise DatabaseError("Pool is closing")
        pool = await self._ensure_pool()
        async with pool.acquire(timeout=self._settings.db_pool_timeout) as conn:
            yield conn

    async def close(self) -> None:
        self._is_closing = True
        if self._pool:
            async with self._lock:
                if self._pool:
                    await self._pool.close()
                    self._pool = None
                    logger.info("Closed connection pool")

    async def is_healthy(self) -> bool:
        if self._is_closing or not self._pool:
            return False
        try:
            async with self.connection() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (OSError, asyncpg.PostgresError) as e:
            logger.warning(f"Pool health check failed: {e}")
            return False


class ConnectionExecutor:
    """DatabaseRepository bound to a single connection (used in transactions)."""

    def __init__(self, conn: asyncpg.Connection):
        self._conn = conn

    async def execute_query(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        rows = await self._conn.fetch(query, *args)
        return [dict(row) for row in rows]

    async def execute_fetchrow(self, query: str, *args: Any) -> Optional[Dict[str, Any]]:
        row = await self._conn.fetchrow(query, *args)
        return dict(row) if row else None

    async def execute_fetchval(self, query: str, *args: Any) -> Any:
        return await self._conn.fetchval(query, *args)

    async def execute_command(self, command: str, *args: Any) -> str:
        return await self._conn.execute(command, *args)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["ConnectionExecutor"]:
        # Nested blocks become savepoints
        async with self._conn.transaction():
            yield self


class PostgresDatabase:
    """DatabaseRepository implementation over an ``AsyncConnectionPool``."""

    def __init__(self, pool: AsyncConnectionPool):
        self._pool = pool

    @property
    def pool(self) -> AsyncConnectionPool:
        return self._pool

    async def execute_query(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        async with self._pool.connection() as conn:
            return await ConnectionExecutor(conn).execute_query(query, *args)

    async def execute_fetchrow(self, query: str, *args: Any) -> Optional[Dict[str, Any]]:
        async with self._pool.connection() as conn:
            return await ConnectionExecutor(conn).execute_fetchrow(query, *args)

    async def execute_fetchval(self, query: str, *args: Any) -> Any:
        async with self._pool.connection() as conn:
            return await conn.fetchval(query, *args)

    async def execute_command(self, command: str, *args: Any) -> str:
        async with self._pool.connection() as conn:
            return await conn.execute(command, *args)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[ConnectionExecutor]:
        async with self._pool.connection() as conn:
            async with conn.transaction():
                yield ConnectionExecutor(conn)
