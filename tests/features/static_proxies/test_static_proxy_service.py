"""Tests for community configurations and snapshot-scoped static proxies."""

import pytest

from resiloc_inventory.core.exceptions import BadRequestError, ForbiddenError
from resiloc_inventory.features.catalog.entities.enums import SnapshotType, StaticProxyType, Visibility
from resiloc_inventory.features.users.entities.user import UserRole


class TestCommunityConfiguration:
    @pytest.mark.asyncio
    async def test_selection_instantiates_template(self, container, seed):
        community = await seed.community()
        resiloc_proxy = await seed.resiloc_proxy("P1", visibility=Visibility.COMMUNITY)

        configured = await seed.configured_static_proxy(community.id, resiloc_proxy.id)

        assert configured.type == StaticProxyType.PROXY_OF_COMMUNITY
        assert configured.resiloc_proxy_id == resiloc_proxy.id
        assert configured.metadata.get("tooltip").value == "Share of households"

    @pytest.mark.asyncio
    async def test_required_values_are_dropped_from_configuration(self, container, seed):
        community = await seed.community()
        configured = await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy()).id)

        updated = await container.static_proxies.update_static_proxy_of_community(
            configured.id,
            {"metadata": {"dateOfData": {"type": "required", "value": "2021-03-01"}}},
            "admin",
        )

        assert not updated.metadata.get("dateOfData").has_value()

    @pytest.mark.asyncio
    async def test_targets_are_ordered(self, container, seed):
        community = await seed.community()
        configured = await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy()).id)

        with pytest.raises(BadRequestError):
            await container.static_proxies.update_static_proxy_of_community(
                configured.id, {"min_target": 80, "max_target": 20}, "admin"
            )

    @pytest.mark.asyncio
    async def test_manager_of_another_community_is_forbidden(self, container, seed):
        community = await seed.community("C1")
        other = await seed.community("Other")
        await seed.member("manager", other.id, [UserRole.LOCAL_MANAGER])
        configured = await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy()).id)

        with pytest.raises(ForbiddenError):
            await container.static_proxies.update_static_proxy_of_community(
                configured.id, {"max_target": 50}, "manager", seed.flid(other.id)
            )

    @pytest.mark.asyncio
    async def test_snapshot_endpoint_rejects_configurations(self, container, seed):
        community = await seed.community()
        configured = await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy()).id)

        with pytest.raises(BadRequestError, match="snapshots only"):
            await container.static_proxies.update_static_proxy_of_snapshot(configured.id, {"value": 3}, "admin")


class TestListings:
    @pytest.mark.asyncio
    async def test_find_public(self, container, seed):
        community = await seed.community()
        public = await seed.configured_static_proxy(
            community.id, (await seed.resiloc_proxy("P1")).id, visibility=Visibility.PUBLIC
        )
        await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy("P2")).id)

        page = await container.static_proxies.find_public()

        assert [item.id for item in page.items] == [public.id]

    @pytest.mark.asyncio
    async def test_citizens_only_see_community_level_configurations(self, container, seed):
        community = await seed.community()
        await seed.member("citizen", community.id)
        await seed.member("expert", community.id, [UserRole.RESILIENCE_EXPERT])
        shared = await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy("P1")).id)
        draft = await seed.configured_static_proxy(
            community.id, (await seed.resiloc_proxy("P2")).id, visibility=Visibility.DRAFT
        )
        flid = seed.flid(community.id)

        citizen_view = await container.static_proxies.get_static_proxies_of_community("selected", "citizen", flid)
        expert_view = await container.static_proxies.get_static_proxies_of_community(community.id, "expert", flid)

        assert [item.id for item in citizen_view.items] == [shared.id]
        assert {item.id for item in expert_view.items} == {shared.id, draft.id}

    @pytest.mark.asyncio
    async def test_static_proxies_of_user_grouped_by_community(self, container, seed):
        community = await seed.community("Riverside")
        await seed.member("citizen", community.id)
        shared = await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy("P1")).id)
        await seed.configured_static_proxy(
            community.id, (await seed.resiloc_proxy("P2")).id, visibility=Visibility.DRAFT
        )

        groups = await container.static_proxies.get_static_proxy_ids_of_user("citizen", "citizen")

        assert groups == [{"id": community.id, "name": "Riverside", "staticProxyIds": [shared.id]}]
        with pytest.raises(ForbiddenError):
            await container.static_proxies.get_static_proxies_of_user("citizen", "someone-else")

    @pytest.mark.asyncio
    async def test_static_proxies_of_snapshot(self, container, seed):
        community = await seed.community()
        configured = await seed.configured_static_proxy(community.id, (await seed.resiloc_proxy()).id)
        snapshot = await container.snapshots.create(community.id, {"name": "S1", "type": SnapshotType.SCENARIO}, "admin")
        await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id, [{"static_proxy_id": configured.id, "value": 7}], "admin"
        )

        page = await container.static_proxies.get_static_proxies_of_snapshot(snapshot.id, "admin")

        [clone] = page.items
        assert clone.type == StaticProxyType.PROXY_OF_SNAPSHOT
        assert clone.value == 7

        updated = await container.static_proxies.update_static_proxy_of_snapshot(clone.id, {"value": 9}, "admin")
        assert updated.value == 9
