"""Identifier utilities."""

import uuid


def generate_uuid_v4() -> str:
    """
    Generate a standard UUIDv4 (random).

    Random ids are used rather than time-ordered ones because composite
    association keys are built from the first segment of each id, which
    must not repeat between records created close together.

    Returns:
        String representation of UUIDv4
    """
    return str(uuid.uuid4())


def composite_id(scenario_id: str, indicator_id: str, proxy_id: str) -> str:
    """Build the key of a scenario/indicator/proxy association.

    The key joins the first dash-separated segment of each id, so the same
    triple always produces the same key.

    >>> composite_id("a1b2-x", "c3d4-y", "e5f6-z")
    'a1b2-c3d4-e5f6'
    """
    return "-".join(
        str(part).split("-")[0] for part in (scenario_id, indicator_id, proxy_id)
    )
