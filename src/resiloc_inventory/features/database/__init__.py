"""Database feature: asyncpg pool, repository protocol and schema."""

from .entities import DatabaseRepository
from .repositories import AsyncConnectionPool, ConnectionExecutor, PostgresDatabase
from .utils import create_schema, handle_database_errors

__all__ = [
    "DatabaseRepository",
    "AsyncConnectionPool",
    "ConnectionExecutor",
    "PostgresDatabase",
    "create_schema",
    "handle_database_errors",
]
