"""Tests for scenario templates and their per-community instances."""

import pytest

from resiloc_inventory.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from resiloc_inventory.features.catalog.entities.enums import StaticProxyType, Visibility
from resiloc_inventory.features.users.entities.user import UserRole
from resiloc_inventory.utils.uuid import composite_id


@pytest.fixture
def flood_template(container, seed):
    """Scenario template with one indicator over two proxies; P1 is weighted."""

    async def build():
        p1 = await seed.resiloc_proxy("P1")
        p2 = await seed.resiloc_proxy("P2", visibility=Visibility.COMMUNITY)
        indicator = await seed.resiloc_indicator("Shelter capacity", [p1.id, p2.id])
        template = await seed.resiloc_scenario("Flood", [indicator.id])
        await container.resiloc_scenarios.update_resiloc_scenario_indicator_proxy(
            composite_id(template.id, indicator.id, p1.id), {"relevance": 0.8, "direction": -0.5}
        )
        return template, indicator, p1, p2

    return build


class TestResilocScenarioService:
    @pytest.mark.asyncio
    async def test_weight_rows_follow_indicator_assignment(self, container, seed, flood_template):
        template, indicator, p1, p2 = await flood_template()

        links = container.repositories.resiloc_scenario_links.records
        assert {link.id for link in links} == {
            composite_id(template.id, indicator.id, p1.id),
            composite_id(template.id, indicator.id, p2.id),
        }

        await container.resiloc_scenarios.assign_resiloc_indicators_for_resiloc_scenario(template.id, [])

        assert container.repositories.resiloc_scenario_links.records == []

    @pytest.mark.asyncio
    async def test_weights_are_range_checked(self, container, seed, flood_template):
        template, indicator, p1, _ = await flood_template()

        with pytest.raises(BadRequestError):
            await container.resiloc_scenarios.update_resiloc_scenario_indicator_proxy(
                composite_id(template.id, indicator.id, p1.id), {"relevance": 2}
            )

    @pytest.mark.asyncio
    async def test_unknown_weight_row(self, container, seed):
        with pytest.raises(NotFoundError):
            await container.resiloc_scenarios.update_resiloc_scenario_indicator_proxy("a-b-c", {"relevance": 0.5})

    @pytest.mark.asyncio
    async def test_populated_view_carries_weights(self, container, seed, flood_template):
        template, indicator, p1, p2 = await flood_template()

        view = await container.resiloc_scenarios.get_resiloc_scenario(template.id, "admin")

        proxies = {proxy["id"]: proxy for proxy in view["resilocIndicators"][0]["resilocProxies"]}
        assert proxies[p1.id]["scenarioIndicatorProxy"]["relevance"] == 0.8
        assert proxies[p2.id]["scenarioIndicatorProxy"]["relevance"] == 0.0

    @pytest.mark.asyncio
    async def test_draft_template_hidden_from_members(self, container, seed):
        community = await seed.community()
        await seed.member("expert", community.id, [UserRole.RESILIENCE_EXPERT])
        template = await container.resiloc_scenarios.create({"name": "Drought"})

        with pytest.raises(ForbiddenError):
            await container.resiloc_scenarios.get_resiloc_scenario(template.id, "expert")
        visible = await container.resiloc_scenarios.get_visible("expert")
        assert visible.items == []

    @pytest.mark.asyncio
    async def test_used_template_cannot_be_removed(self, container, seed, flood_template):
        community = await seed.community()
        template, _, _, _ = await flood_template()
        await container.communities.select_scenarios_for_community(community.id, [template.id], "admin")

        with pytest.raises(BadRequestError, match="used"):
            await container.resiloc_scenarios.remove(template.id)


class TestScenarioInstances:
    @pytest.mark.asyncio
    async def test_instance_copies_template_weights(self, container, seed, flood_template):
        community = await seed.community("C1")
        template, resiloc_indicator, p1, p2 = await flood_template()

        selected = await container.communities.select_scenarios_for_community(community.id, [template.id], "admin")

        scenario = await container.repositories.scenarios.get_by_id(selected.scenarios[template.id])
        assert scenario.resiloc_scenario_id == template.id
        [indicator] = await container.repositories.indicators.get_by_ids(scenario.indicator_ids)
        assert indicator.resiloc_indicator_id == resiloc_indicator.id

        static_proxies = {
            static_proxy.resiloc_proxy_id: static_proxy
            for static_proxy in await container.repositories.static_proxies.get_by_ids(indicator.static_proxy_ids)
        }
        assert set(static_proxies) == {p1.id, p2.id}
        assert all(sp.type == StaticProxyType.PROXY_OF_INDICATOR for sp in static_proxies.values())
        assert static_proxies[p2.id].visibility == Visibility.COMMUNITY

        weighted = await container.repositories.scenario_links.get_by_id(
            composite_id(scenario.id, indicator.id, static_proxies[p1.id].id)
        )
        unweighted = await container.repositories.scenario_links.get_by_id(
            composite_id(scenario.id, indicator.id, static_proxies[p2.id].id)
        )
        assert (weighted.relevance, weighted.direction) == (0.8, -0.5)
        assert (unweighted.relevance, unweighted.direction) == (0.0, 0.0)

    @pytest.mark.asyncio
    async def test_deselecting_removes_the_whole_instance(self, container, seed, flood_template):
        community = await seed.community("C1")
        template, _, _, _ = await flood_template()
        await container.communities.select_scenarios_for_community(community.id, [template.id], "admin")

        community = await container.communities.select_scenarios_for_community(community.id, [], "admin")

        assert community.scenarios == {}
        assert container.repositories.scenarios.records == []
        assert container.repositories.indicators.records == []
        assert container.repositories.static_proxies.records == []
        assert container.repositories.scenario_links.records == []

    @pytest.mark.asyncio
    async def test_manager_edits_weights_of_own_instance(self, container, seed, flood_template):
        community = await seed.community("C1")
        other = await seed.community("Other")
        await seed.member("manager", community.id, [UserRole.LOCAL_MANAGER])
        template, _, _, _ = await flood_template()
        selected = await container.communities.select_scenarios_for_community(community.id, [template.id], "admin")
        scenario_id = selected.scenarios[template.id]
        link = container.repositories.scenario_links.records[0]

        updated = await container.scenarios.update_scenario_indicator_proxy(
            scenario_id, link.id, {"relevance": 0.3}, "manager", seed.flid(community.id)
        )
        assert updated.relevance == 0.3

        with pytest.raises(ForbiddenError):
            await container.scenarios.update_scenario_indicator_proxy(
                scenario_id, link.id, {"relevance": 0.1}, "manager", seed.flid(other.id)
            )

    @pytest.mark.asyncio
    async def test_weight_row_of_another_instance_is_not_found(self, container, seed, flood_template):
        community = await seed.community("C1")
        template, _, _, _ = await flood_template()
        selected = await container.communities.select_scenarios_for_community(community.id, [template.id], "admin")

        with pytest.raises(NotFoundError):
            await container.scenarios.update_scenario_indicator_proxy(
                selected.scenarios[template.id], "ffffffff-0000-0000", {"relevance": 0.1}, "admin"
            )

    @pytest.mark.asyncio
    async def test_instance_metadata_is_validated(self, container, seed, flood_template):
        community = await seed.community("C1")
        template, _, _, _ = await flood_template()
        selected = await container.communities.select_scenarios_for_community(community.id, [template.id], "admin")
        scenario_id = selected.scenarios[template.id]

        updated = await container.scenarios.update(
            scenario_id, {"metadata": [{"name": "Budget", "type": "number", "value": 1200}]}, "admin"
        )
        assert updated.metadata == [{"name": "budget", "type": "number", "value": 1200, "mandatory": False}]

        with pytest.raises(BadRequestError):
            await container.scenarios.update(
                scenario_id, {"metadata": [{"name": "Budget", "type": "number", "value": "many"}]}, "admin"
            )
