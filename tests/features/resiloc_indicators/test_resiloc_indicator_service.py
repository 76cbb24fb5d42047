"""Tests for the indicator template service."""

import pytest

from resiloc_inventory.core.exceptions import BadRequestError, ForbiddenError
from resiloc_inventory.features.catalog.entities.enums import TemplateStatus, Visibility
from resiloc_inventory.features.users.entities.user import UserRole


class TestResilocIndicatorService:
    @pytest.mark.asyncio
    async def test_mismatched_context_and_criteria(self, container, seed):
        await seed.admin()

        with pytest.raises(BadRequestError, match="does not belong"):
            await container.resiloc_indicators.create(
                {"name": "Indicator", "context": "framework", "criteria": "diversity"}, "admin"
            )

    @pytest.mark.asyncio
    async def test_update_rechecks_the_pair(self, container, seed):
        indicator = await seed.resiloc_indicator("Indicator", [], context="resource", criteria="diversity")

        with pytest.raises(BadRequestError):
            await container.resiloc_indicators.update(indicator.id, {"context": "process"}, "admin")

        updated = await container.resiloc_indicators.update(
            indicator.id, {"context": "process", "criteria": "innovation"}, "admin"
        )
        assert updated.context.value == "process"

    @pytest.mark.asyncio
    async def test_proxy_replacement_keeps_order_of_kept_links(self, container, seed):
        p1 = await seed.resiloc_proxy("P1")
        p2 = await seed.resiloc_proxy("P2")
        p3 = await seed.resiloc_proxy("P3")
        indicator = await seed.resiloc_indicator("Indicator", [p1.id, p2.id])

        updated = await container.resiloc_indicators.assign_resiloc_proxies_for_resiloc_indicator(
            indicator.id, [p3.id, p2.id], "admin"
        )

        assert updated.resiloc_proxy_ids == [p2.id, p3.id]

    @pytest.mark.asyncio
    async def test_duplicates_rejected_before_anything_else(self, container, seed):
        p1 = await seed.resiloc_proxy("P1")
        indicator = await seed.resiloc_indicator("Indicator", [])

        with pytest.raises(BadRequestError, match="duplicate"):
            await container.resiloc_indicators.assign_resiloc_proxies_for_resiloc_indicator(
                indicator.id, [p1.id, p1.id], "admin"
            )

    @pytest.mark.asyncio
    async def test_requested_proxy_cannot_be_linked(self, container, seed):
        community = await seed.community()
        await seed.member("expert", community.id, [UserRole.RESILIENCE_EXPERT])
        requested = await container.resiloc_proxies.create({"name": "Requested"}, "expert", seed.flid(community.id))
        indicator = await seed.resiloc_indicator("Indicator", [])

        with pytest.raises(BadRequestError):
            await container.resiloc_indicators.assign_resiloc_proxies_for_resiloc_indicator(
                indicator.id, [requested.id], "admin"
            )

    @pytest.mark.asyncio
    async def test_member_cannot_edit_verified_template(self, container, seed):
        community = await seed.community()
        await seed.member("expert", community.id, [UserRole.RESILIENCE_EXPERT])
        p1 = await seed.resiloc_proxy("P1")
        indicator = await seed.resiloc_indicator("Indicator", [])

        with pytest.raises(ForbiddenError):
            await container.resiloc_indicators.assign_resiloc_proxies_for_resiloc_indicator(
                indicator.id, [p1.id], "expert", seed.flid(community.id)
            )

    @pytest.mark.asyncio
    async def test_member_request_is_recorded_on_community(self, container, seed):
        community = await seed.community()
        await seed.member("expert", community.id, [UserRole.RESILIENCE_EXPERT])

        requested = await container.resiloc_indicators.create(
            {"name": "Requested", "context": "process", "criteria": "inclusiveness", "visibility": "public"},
            "expert",
            seed.flid(community.id),
        )

        assert requested.status == TemplateStatus.REQUESTED
        assert requested.visibility == Visibility.DRAFT
        stored = await container.repositories.communities.get_by_id(community.id)
        assert stored.requested_indicators == [requested.id]

    @pytest.mark.asyncio
    async def test_template_in_scenario_cannot_be_removed(self, container, seed):
        p1 = await seed.resiloc_proxy("P1")
        indicator = await seed.resiloc_indicator("Indicator", [p1.id])
        await seed.resiloc_scenario("Flood", [indicator.id])

        with pytest.raises(BadRequestError, match="scenario"):
            await container.resiloc_indicators.remove(indicator.id, "admin")

    @pytest.mark.asyncio
    async def test_instantiated_template_cannot_go_back_to_pending(self, container, seed):
        community = await seed.community()
        p1 = await seed.resiloc_proxy("P1")
        indicator = await seed.resiloc_indicator("Indicator", [p1.id])
        scenario = await seed.resiloc_scenario("Flood", [indicator.id])
        await container.communities.select_scenarios_for_community(community.id, [scenario.id], "admin")

        with pytest.raises(BadRequestError):
            await container.resiloc_indicators.update_status(indicator.id, TemplateStatus.REQUESTED)
