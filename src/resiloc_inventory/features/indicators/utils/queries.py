"""SQL statements for indicator instances."""

INDICATOR_COLUMNS = "id, visibility, resiloc_indicator_id, static_proxy_ids, date_created, date_modified"

INDICATOR_INSERT = """
    INSERT INTO {schema}.indicators (
        id, visibility, resiloc_indicator_id, static_proxy_ids, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6)
"""

INDICATOR_GET_BY_ID = "SELECT " + INDICATOR_COLUMNS + " FROM {schema}.indicators WHERE id = $1"

INDICATOR_GET_BY_IDS = (
    "SELECT " + INDICATOR_COLUMNS
    + " FROM {schema}.indicators WHERE id = ANY($1::text[]) ORDER BY date_created, id"
)

INDICATOR_DELETE = "DELETE FROM {schema}.indicators WHERE id = $1"

INDICATOR_FOR_TEMPLATE_EXISTS = """
    SELECT EXISTS (SELECT 1 FROM {schema}.indicators WHERE resiloc_indicator_id = $1)
"""
