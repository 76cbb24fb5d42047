"""SQL statements for users and their per-community roles."""

USER_COLUMNS = """
    u.id, u.username, u.email, u.password_hash, u.is_admin, u.resiloc_service_role,
    u.first_name, u.last_name, u.phone, u.is_active, u.date_created, u.date_modified,
    COALESCE(
        (SELECT jsonb_object_agg(r.community_id, to_jsonb(r.roles))
         FROM {schema}.user_community_roles r WHERE r.user_id = u.id),
        '{{}}'::jsonb
    ) AS user_roles
"""

USER_INSERT = """
    INSERT INTO {schema}.users (
        id, username, email, password_hash, is_admin, resiloc_service_role,
        first_name, last_name, phone, is_active, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
"""

USER_UPDATE = """
    UPDATE {schema}.users SET
        email = $2, first_name = $3, last_name = $4, phone = $5,
        is_active = $6, date_modified = $7, password_hash = $8
    WHERE username = $1
"""

USER_GET_BY_ID = "SELECT " + USER_COLUMNS + " FROM {schema}.users u WHERE u.id = $1"

USER_GET_BY_USERNAME = "SELECT " + USER_COLUMNS + " FROM {schema}.users u WHERE u.username = $1"

USER_LIST_ALL = "SELECT " + USER_COLUMNS + " FROM {schema}.users u ORDER BY u.date_created, u.id"

USER_DELETE = "DELETE FROM {schema}.users WHERE username = $1"

USER_ID_BY_USERNAME = "SELECT id FROM {schema}.users WHERE username = $1"

ROLES_SET = """
    INSERT INTO {schema}.user_community_roles (user_id, community_id, roles)
    VALUES ($1, $2, $3)
    ON CONFLICT (user_id, community_id) DO UPDATE SET roles = EXCLUDED.roles
"""

ROLES_ADD = """
    INSERT INTO {schema}.user_community_roles (user_id, community_id, roles)
    VALUES ($1, $2, $3)
    ON CONFLICT (user_id, community_id) DO UPDATE SET roles = ARRAY(
        SELECT DISTINCT unnest({schema}.user_community_roles.roles || EXCLUDED.roles)
    )
"""

ROLES_REMOVE_ONE = """
    UPDATE {schema}.user_community_roles SET roles = array_remove(roles, $3)
    WHERE user_id = $1 AND community_id = $2
"""

ROLES_CLEAR = "DELETE FROM {schema}.user_community_roles WHERE user_id = $1 AND community_id = $2"
