"""SQL statements for indicator templates."""

RESILOC_INDICATOR_COLUMNS = """
    id, name, description, context, criteria, dimension, tags, status, visibility,
    resiloc_proxy_ids, date_created, date_modified
"""

RESILOC_INDICATOR_INSERT = """
    INSERT INTO {schema}.resiloc_indicators (
        id, name, description, context, criteria, dimension, tags, status, visibility,
        resiloc_proxy_ids, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
"""

RESILOC_INDICATOR_UPDATE = """
    UPDATE {schema}.resiloc_indicators SET
        name = $2, description = $3, context = $4, criteria = $5, dimension = $6, tags = $7,
        status = $8, visibility = $9, resiloc_proxy_ids = $10, date_modified = $11
    WHERE id = $1
"""

RESILOC_INDICATOR_GET_BY_ID = (
    "SELECT " + RESILOC_INDICATOR_COLUMNS + " FROM {schema}.resiloc_indicators WHERE id = $1"
)

RESILOC_INDICATOR_GET_BY_IDS = (
    "SELECT " + RESILOC_INDICATOR_COLUMNS
    + " FROM {schema}.resiloc_indicators WHERE id = ANY($1::text[]) ORDER BY date_created, id"
)

RESILOC_INDICATOR_LIST_ALL = (
    "SELECT " + RESILOC_INDICATOR_COLUMNS + " FROM {schema}.resiloc_indicators ORDER BY date_created, id"
)

RESILOC_INDICATOR_DELETE = "DELETE FROM {schema}.resiloc_indicators WHERE id = $1"

RESILOC_INDICATOR_WITH_PROXY_EXISTS = """
    SELECT EXISTS (SELECT 1 FROM {schema}.resiloc_indicators WHERE $1 = ANY(resiloc_proxy_ids))
"""
