"""SQL statements for scenario instances and their weights."""

SCENARIO_COLUMNS = """
    id, visibility, status, date_submitted, metadata, resiloc_scenario_id, indicator_ids,
    date_created, date_modified
"""

SCENARIO_INSERT = """
    INSERT INTO {schema}.scenarios (
        id, visibility, status, date_submitted, metadata, resiloc_scenario_id, indicator_ids,
        date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
"""

SCENARIO_UPDATE = """
    UPDATE {schema}.scenarios SET
        visibility = $2, status = $3, date_submitted = $4, metadata = $5, indicator_ids = $6,
        date_modified = $7
    WHERE id = $1
"""

SCENARIO_GET_BY_ID = "SELECT " + SCENARIO_COLUMNS + " FROM {schema}.scenarios WHERE id = $1"

SCENARIO_GET_BY_IDS = (
    "SELECT " + SCENARIO_COLUMNS
    + " FROM {schema}.scenarios WHERE id = ANY($1::text[]) ORDER BY date_created, id"
)

SCENARIO_LIST_ALL = "SELECT " + SCENARIO_COLUMNS + " FROM {schema}.scenarios ORDER BY date_created, id"

SCENARIO_DELETE = "DELETE FROM {schema}.scenarios WHERE id = $1"

SCENARIO_LINK_INSERT = """
    INSERT INTO {schema}.scenario_indicator_proxies (
        id, relevance, direction, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5)
    ON CONFLICT (id) DO NOTHING
"""

SCENARIO_LINK_UPDATE = """
    UPDATE {schema}.scenario_indicator_proxies SET
        relevance = $2, direction = $3, date_modified = $4
    WHERE id = $1
"""

SCENARIO_LINK_GET_BY_ID = """
    SELECT id, relevance, direction, date_created, date_modified
    FROM {schema}.scenario_indicator_proxies WHERE id = $1
"""

SCENARIO_LINK_GET_BY_IDS = """
    SELECT id, relevance, direction, date_created, date_modified
    FROM {schema}.scenario_indicator_proxies WHERE id = ANY($1::text[])
"""

SCENARIO_LINK_DELETE_MANY = "DELETE FROM {schema}.scenario_indicator_proxies WHERE id = ANY($1::text[])"
