"""SQL statements for snapshots."""

SNAPSHOT_COLUMNS = """
    id, name, type, description, visibility, status, date_submitted,
    static_proxy_ids, date_created, date_modified
"""

SNAPSHOT_INSERT = """
    INSERT INTO {schema}.snapshots (
        id, name, type, description, visibility, status, date_submitted,
        static_proxy_ids, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
"""

SNAPSHOT_UPDATE = """
    UPDATE {schema}.snapshots SET
        name = $2, type = $3, description = $4, visibility = $5, status = $6,
        date_submitted = $7, static_proxy_ids = $8, date_modified = $9
    WHERE id = $1
"""

SNAPSHOT_GET_BY_ID = "SELECT " + SNAPSHOT_COLUMNS + " FROM {schema}.snapshots WHERE id = $1"

SNAPSHOT_GET_BY_IDS = (
    "SELECT " + SNAPSHOT_COLUMNS
    + " FROM {schema}.snapshots WHERE id = ANY($1::text[]) ORDER BY date_created, id"
)

SNAPSHOT_GET_BY_STATIC_PROXY = (
    "SELECT " + SNAPSHOT_COLUMNS + " FROM {schema}.snapshots WHERE $1 = ANY(static_proxy_ids) LIMIT 1"
)

SNAPSHOT_DELETE = "DELETE FROM {schema}.snapshots WHERE id = $1"
