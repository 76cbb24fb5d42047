"""Database repositories."""

from .connection_pool import AsyncConnectionPool, ConnectionExecutor, PostgresDatabase

__all__ = ["AsyncConnectionPool", "ConnectionExecutor", "PostgresDatabase"]
