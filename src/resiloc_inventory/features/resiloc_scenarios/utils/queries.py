"""SQL statements for scenario templates and their weights."""

RESILOC_SCENARIO_COLUMNS = """
    id, name, description, visibility, status, formula, metadata, resiloc_indicator_ids,
    date_created, date_modified
"""

RESILOC_SCENARIO_INSERT = """
    INSERT INTO {schema}.resiloc_scenarios (
        id, name, description, visibility, status, formula, metadata, resiloc_indicator_ids,
        date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
"""

RESILOC_SCENARIO_UPDATE = """
    UPDATE {schema}.resiloc_scenarios SET
        name = $2, description = $3, visibility = $4, status = $5, formula = $6, metadata = $7,
        resiloc_indicator_ids = $8, date_modified = $9
    WHERE id = $1
"""

RESILOC_SCENARIO_GET_BY_ID = (
    "SELECT " + RESILOC_SCENARIO_COLUMNS + " FROM {schema}.resiloc_scenarios WHERE id = $1"
)

RESILOC_SCENARIO_GET_BY_IDS = (
    "SELECT " + RESILOC_SCENARIO_COLUMNS
    + " FROM {schema}.resiloc_scenarios WHERE id = ANY($1::text[]) ORDER BY date_created, id"
)

RESILOC_SCENARIO_LIST_ALL = (
    "SELECT " + RESILOC_SCENARIO_COLUMNS + " FROM {schema}.resiloc_scenarios ORDER BY date_created, id"
)

RESILOC_SCENARIO_DELETE = "DELETE FROM {schema}.resiloc_scenarios WHERE id = $1"

RESILOC_SCENARIO_WITH_INDICATOR_EXISTS = """
    SELECT EXISTS (SELECT 1 FROM {schema}.resiloc_scenarios WHERE $1 = ANY(resiloc_indicator_ids))
"""

RESILOC_SCENARIO_LINK_INSERT = """
    INSERT INTO {schema}.resiloc_scenario_indicator_proxies (
        id, relevance, direction, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5)
    ON CONFLICT (id) DO NOTHING
"""

RESILOC_SCENARIO_LINK_UPDATE = """
    UPDATE {schema}.resiloc_scenario_indicator_proxies SET
        relevance = $2, direction = $3, date_modified = $4
    WHERE id = $1
"""

RESILOC_SCENARIO_LINK_GET_BY_ID = """
    SELECT id, relevance, direction, date_created, date_modified
    FROM {schema}.resiloc_scenario_indicator_proxies WHERE id = $1
"""

RESILOC_SCENARIO_LINK_GET_BY_IDS = """
    SELECT id, relevance, direction, date_created, date_modified
    FROM {schema}.resiloc_scenario_indicator_proxies WHERE id = ANY($1::text[])
"""

RESILOC_SCENARIO_LINK_DELETE_MANY = """
    DELETE FROM {schema}.resiloc_scenario_indicator_proxies WHERE id = ANY($1::text[])
"""
