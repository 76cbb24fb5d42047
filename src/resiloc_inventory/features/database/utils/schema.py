"""Schema creation for the inventory store.

Statements are idempotent so they can run on every startup when
``run_migrations`` is enabled.
"""

import logging
from typing import List

from ..entities.protocols import DatabaseRepository

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS: List[str] = [
    "CREATE SCHEMA IF NOT EXISTS {schema}",

    """
    CREATE TABLE IF NOT EXISTS {schema}.users (
        id TEXT PRIMARY KEY,
        username TEXT NOT NULL UNIQUE,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        is_admin BOOLEAN NOT NULL DEFAULT FALSE,
        resiloc_service_role TEXT,
        first_name TEXT NOT NULL DEFAULT '',
        last_name TEXT NOT NULL DEFAULT '',
        phone TEXT NOT NULL DEFAULT '',
        is_active BOOLEAN NOT NULL DEFAULT FALSE,
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.user_community_roles (
        user_id TEXT NOT NULL REFERENCES {schema}.users(id) ON DELETE CASCADE,
        community_id TEXT NOT NULL,
        roles TEXT[] NOT NULL DEFAULT '{{}}',
        PRIMARY KEY (user_id, community_id)
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.communities (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        visibility TEXT NOT NULL DEFAULT 'draft',
        metadata JSONB NOT NULL DEFAULT '{{}}',
        users TEXT[] NOT NULL DEFAULT '{{}}',
        parents TEXT[] NOT NULL DEFAULT '{{}}',
        peers TEXT[] NOT NULL DEFAULT '{{}}',
        children TEXT[] NOT NULL DEFAULT '{{}}',
        requested_proxies TEXT[] NOT NULL DEFAULT '{{}}',
        requested_indicators TEXT[] NOT NULL DEFAULT '{{}}',
        snapshots TEXT[] NOT NULL DEFAULT '{{}}',
        deletion_started_at TIMESTAMPTZ,
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.community_static_proxies (
        community_id TEXT NOT NULL REFERENCES {schema}.communities(id) ON DELETE CASCADE,
        resiloc_proxy_id TEXT NOT NULL,
        static_proxy_id TEXT NOT NULL UNIQUE,
        PRIMARY KEY (community_id, resiloc_proxy_id)
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.community_scenarios (
        community_id TEXT NOT NULL REFERENCES {schema}.communities(id) ON DELETE CASCADE,
        resiloc_scenario_id TEXT NOT NULL,
        scenario_id TEXT NOT NULL UNIQUE,
        PRIMARY KEY (community_id, resiloc_scenario_id)
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.resiloc_proxies (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        description TEXT NOT NULL DEFAULT '',
        type TEXT,
        tags TEXT[] NOT NULL DEFAULT '{{}}',
        status TEXT NOT NULL DEFAULT 'requested',
        visibility TEXT NOT NULL DEFAULT 'draft',
        unit_of_measurement JSONB NOT NULL DEFAULT '[]',
        metadata JSONB NOT NULL DEFAULT '{{}}',
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.static_proxies (
        id TEXT PRIMARY KEY,
        type TEXT,
        value DOUBLE PRECISION,
        min_target DOUBLE PRECISION,
        max_target DOUBLE PRECISION,
        visibility TEXT NOT NULL DEFAULT 'draft',
        metadata JSONB NOT NULL DEFAULT '{{}}',
        resiloc_proxy_id TEXT NOT NULL REFERENCES {schema}.resiloc_proxies(id),
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.resiloc_indicators (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        description TEXT NOT NULL DEFAULT '',
        context TEXT NOT NULL,
        criteria TEXT NOT NULL,
        dimension TEXT,
        tags TEXT[] NOT NULL DEFAULT '{{}}',
        status TEXT NOT NULL DEFAULT 'requested',
        visibility TEXT NOT NULL DEFAULT 'draft',
        resiloc_proxy_ids TEXT[] NOT NULL DEFAULT '{{}}',
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.indicators (
        id TEXT PRIMARY KEY,
        visibility TEXT NOT NULL DEFAULT 'draft',
        resiloc_indicator_id TEXT NOT NULL REFERENCES {schema}.resiloc_indicators(id),
        static_proxy_ids TEXT[] NOT NULL DEFAULT '{{}}',
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.resiloc_scenarios (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        description TEXT NOT NULL DEFAULT '',
        visibility TEXT NOT NULL DEFAULT 'draft',
        status TEXT NOT NULL DEFAULT 'verified',
        formula TEXT,
        metadata JSONB NOT NULL DEFAULT '[]',
        resiloc_indicator_ids TEXT[] NOT NULL DEFAULT '{{}}',
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.resiloc_scenario_indicator_proxies (
        id TEXT PRIMARY KEY,
        relevance DOUBLE PRECISION NOT NULL DEFAULT 0,
        direction DOUBLE PRECISION NOT NULL DEFAULT 0,
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.scenarios (
        id TEXT PRIMARY KEY,
        visibility TEXT NOT NULL DEFAULT 'draft',
        status TEXT NOT NULL DEFAULT 'on_hold',
        date_submitted TIMESTAMPTZ,
        metadata JSONB NOT NULL DEFAULT '[]',
        resiloc_scenario_id TEXT NOT NULL REFERENCES {schema}.resiloc_scenarios(id),
        indicator_ids TEXT[] NOT NULL DEFAULT '{{}}',
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.scenario_indicator_proxies (
        id TEXT PRIMARY KEY,
        relevance DOUBLE PRECISION NOT NULL DEFAULT 0,
        direction DOUBLE PRECISION NOT NULL DEFAULT 0,
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,

    """
    CREATE TABLE IF NOT EXISTS {schema}.snapshots (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        type TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        visibility TEXT NOT NULL DEFAULT 'draft',
        status TEXT NOT NULL DEFAULT 'on_hold',
        date_submitted TIMESTAMPTZ,
        static_proxy_ids TEXT[] NOT NULL DEFAULT '{{}}',
        date_created TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        date_modified TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
]


async def create_schema(database: DatabaseRepository, schema: str) -> None:
    """Create the schema and all tables if they do not exist."""
    async with database.transaction() as tx:
        for statement in SCHEMA_STATEMENTS:
            await tx.execute_command(statement.format(schema=schema))
    logger.info(f"Ensured inventory schema '{schema}'")
