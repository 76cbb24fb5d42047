"""SQL statements for proxy templates."""

RESILOC_PROXY_COLUMNS = """
    id, name, description, type, tags, status, visibility,
    unit_of_measurement, metadata, date_created, date_modified
"""

RESILOC_PROXY_INSERT = """
    INSERT INTO {schema}.resiloc_proxies (
        id, name, description, type, tags, status, visibility,
        unit_of_measurement, metadata, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
"""

RESILOC_PROXY_UPDATE = """
    UPDATE {schema}.resiloc_proxies SET
        name = $2, description = $3, type = $4, tags = $5, status = $6, visibility = $7,
        unit_of_measurement = $8, metadata = $9, date_modified = $10
    WHERE id = $1
"""

RESILOC_PROXY_GET_BY_ID = "SELECT " + RESILOC_PROXY_COLUMNS + " FROM {schema}.resiloc_proxies WHERE id = $1"

RESILOC_PROXY_GET_BY_IDS = (
    "SELECT " + RESILOC_PROXY_COLUMNS
    + " FROM {schema}.resiloc_proxies WHERE id = ANY($1::text[]) ORDER BY date_created, id"
)

RESILOC_PROXY_LIST_ALL = (
    "SELECT " + RESILOC_PROXY_COLUMNS + " FROM {schema}.resiloc_proxies ORDER BY date_created, id"
)

RESILOC_PROXY_DELETE = "DELETE FROM {schema}.resiloc_proxies WHERE id = $1"
