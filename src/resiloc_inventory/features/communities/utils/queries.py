"""SQL statements for communities and their association maps.

Set and relation column names come from ``CommunitySetField`` and
``CommunityRelation`` values and are substituted as ``{column}``.
"""

COMMUNITY_COLUMNS = """
    c.id, c.name, c.visibility, c.metadata, c.users, c.parents, c.peers, c.children,
    c.requested_proxies, c.requested_indicators, c.snapshots,
    c.deletion_started_at, c.date_created, c.date_modified,
    COALESCE(
        (SELECT jsonb_object_agg(sp.resiloc_proxy_id, sp.static_proxy_id)
         FROM {schema}.community_static_proxies sp WHERE sp.community_id = c.id),
        '{{}}'::jsonb
    ) AS static_proxies,
    COALESCE(
        (SELECT jsonb_object_agg(cs.resiloc_scenario_id, cs.scenario_id)
         FROM {schema}.community_scenarios cs WHERE cs.community_id = c.id),
        '{{}}'::jsonb
    ) AS scenarios
"""

COMMUNITY_INSERT = """
    INSERT INTO {schema}.communities (
        id, name, visibility, metadata, users, parents, peers, children,
        requested_proxies, requested_indicators, snapshots, date_created, date_modified
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
"""

COMMUNITY_UPDATE = """
    UPDATE {schema}.communities SET name = $2, visibility = $3, metadata = $4, date_modified = $5
    WHERE id = $1
"""

COMMUNITY_GET_BY_ID = "SELECT " + COMMUNITY_COLUMNS + " FROM {schema}.communities c WHERE c.id = $1"

COMMUNITY_GET_BY_IDS = (
    "SELECT " + COMMUNITY_COLUMNS
    + " FROM {schema}.communities c WHERE c.id = ANY($1::text[]) ORDER BY c.date_created, c.id"
)

COMMUNITY_LIST_ALL = "SELECT " + COMMUNITY_COLUMNS + " FROM {schema}.communities c ORDER BY c.date_created, c.id"

COMMUNITY_LIST_PENDING_DELETION = (
    "SELECT " + COMMUNITY_COLUMNS
    + " FROM {schema}.communities c WHERE c.deletion_started_at IS NOT NULL ORDER BY c.deletion_started_at"
)

COMMUNITY_LIST_FOLLOWED = (
    "SELECT " + COMMUNITY_COLUMNS
    + " FROM {schema}.communities c WHERE $1 = ANY(c.users) ORDER BY c.date_created, c.id"
)

COMMUNITY_LIST_FOLLOWABLE = (
    "SELECT " + COMMUNITY_COLUMNS
    + " FROM {schema}.communities c WHERE NOT ($1 = ANY(c.users)) AND c.visibility <> 'draft'"
    + " ORDER BY c.date_created, c.id"
)

COMMUNITY_DELETE = "DELETE FROM {schema}.communities WHERE id = $1"

COMMUNITY_ADD_TO_SET = """
    UPDATE {schema}.communities SET {column} = array_append({column}, $2), date_modified = NOW()
    WHERE id = $1 AND NOT ($2 = ANY({column}))
"""

COMMUNITY_PULL_FROM_SET = """
    UPDATE {schema}.communities SET {column} = array_remove({column}, $2), date_modified = NOW()
    WHERE id = $1
"""

COMMUNITY_PULL_FROM_ALL = """
    UPDATE {schema}.communities SET {column} = array_remove({column}, $1), date_modified = NOW()
    WHERE $1 = ANY({column})
"""

COMMUNITY_MARK_DELETION = "UPDATE {schema}.communities SET deletion_started_at = $2 WHERE id = $1"

STATIC_PROXY_UPSERT = """
    INSERT INTO {schema}.community_static_proxies (community_id, resiloc_proxy_id, static_proxy_id)
    VALUES ($1, $2, $3)
    ON CONFLICT (community_id, resiloc_proxy_id) DO UPDATE SET static_proxy_id = EXCLUDED.static_proxy_id
"""

STATIC_PROXY_DELETE = """
    DELETE FROM {schema}.community_static_proxies WHERE community_id = $1 AND resiloc_proxy_id = $2
"""

SCENARIO_UPSERT = """
    INSERT INTO {schema}.community_scenarios (community_id, resiloc_scenario_id, scenario_id)
    VALUES ($1, $2, $3)
    ON CONFLICT (community_id, resiloc_scenario_id) DO UPDATE SET scenario_id = EXCLUDED.scenario_id
"""

SCENARIO_DELETE = """
    DELETE FROM {schema}.community_scenarios WHERE community_id = $1 AND resiloc_scenario_id = $2
"""

COMMUNITY_ID_BY_STATIC_PROXY = """
    SELECT community_id FROM {schema}.community_static_proxies WHERE static_proxy_id = $1
"""

COMMUNITY_ID_BY_SCENARIO = """
    SELECT community_id FROM {schema}.community_scenarios WHERE scenario_id = $1
"""

COMMUNITY_ID_BY_SET_MEMBER = """
    SELECT id FROM {schema}.communities WHERE $1 = ANY({column}) ORDER BY date_created LIMIT 1
"""

RESILOC_PROXY_IN_USE = """
    SELECT EXISTS (SELECT 1 FROM {schema}.community_static_proxies WHERE resiloc_proxy_id = $1)
"""

RESILOC_SCENARIO_IN_USE = """
    SELECT EXISTS (SELECT 1 FROM {schema}.community_scenarios WHERE resiloc_scenario_id = $1)
"""
