"""SQL statements for static proxies."""

STATIC_PROXY_COLUMNS = """
    id, type, value, min_target, max_target, visibility, metadata,
    resiloc_proxy_id, date_created, date_modified
"""

STATIC_PROXY_INSERT = """
    INSERT INTO {schema}.static_proxies (
        id, type, value, min_target, max_target, visibility, metadata,
        resiloc_proxy_id, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
"""

STATIC_PROXY_UPDATE = """
    UPDATE {schema}.static_proxies SET
        value = $2, min_target = $3, max_target = $4, visibility = $5, metadata = $6, date_modified = $7
    WHERE id = $1
"""

STATIC_PROXY_GET_BY_ID = "SELECT " + STATIC_PROXY_COLUMNS + " FROM {schema}.static_proxies WHERE id = $1"

STATIC_PROXY_GET_BY_IDS = (
    "SELECT " + STATIC_PROXY_COLUMNS
    + " FROM {schema}.static_proxies WHERE id = ANY($1::text[]) ORDER BY date_created, id"
)

STATIC_PROXY_LIST_ALL = "SELECT " + STATIC_PROXY_COLUMNS + " FROM {schema}.static_proxies ORDER BY date_created, id"

STATIC_PROXY_LIST_BY_VISIBILITY = (
    "SELECT " + STATIC_PROXY_COLUMNS
    + " FROM {schema}.static_proxies WHERE visibility = $1 ORDER BY date_created, id"
)

STATIC_PROXY_DELETE = "DELETE FROM {schema}.static_proxies WHERE id = $1"

STATIC_PROXY_DELETE_MANY = "DELETE FROM {schema}.static_proxies WHERE id = ANY($1::text[])"
