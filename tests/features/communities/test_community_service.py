"""Tests for the community service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from resiloc_inventory.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from resiloc_inventory.features.catalog.entities.enums import SnapshotType, StaticProxyType, Visibility
from resiloc_inventory.features.communities.entities import CommunityRelation, EdgeOperation
from resiloc_inventory.features.communities.services import CommunityService
from resiloc_inventory.features.users.entities.user import UserRole
from resiloc_inventory.utils.datetime import utc_now


class TestCommunityGraph:
    """Edges are recorded on both endpoints."""

    @pytest.mark.asyncio
    async def test_assign_parent_records_child_on_other_side(self, container, seed):
        a = await seed.community("A")
        b = await seed.community("B")

        await container.communities.assign_pointers(a.id, parents=[b.id])

        stored_a = await container.repositories.communities.get_by_id(a.id)
        stored_b = await container.repositories.communities.get_by_id(b.id)
        assert stored_a.parents == [b.id]
        assert stored_b.children == [a.id]

    @pytest.mark.asyncio
    async def test_peers_are_symmetric(self, container, seed):
        a = await seed.community("A")
        b = await seed.community("B")

        await container.communities.assign_pointers(a.id, peers=[b.id])

        assert (await container.repositories.communities.get_by_id(b.id)).peers == [a.id]

    @pytest.mark.asyncio
    async def test_assigning_existing_edge_twice_keeps_one_entry(self, container, seed):
        a = await seed.community("A")
        b = await seed.community("B")

        await container.communities.assign_pointers(a.id, children=[b.id])
        await container.communities.assign_pointers(a.id, children=[b.id])

        assert (await container.repositories.communities.get_by_id(a.id)).children == [b.id]
        assert (await container.repositories.communities.get_by_id(b.id)).parents == [a.id]

    @pytest.mark.asyncio
    async def test_remove_pointers_clears_both_sides(self, container, seed):
        a = await seed.community("A")
        b = await seed.community("B")
        c = await seed.community("C")
        await container.communities.assign_pointers(a.id, parents=[b.id], peers=[c.id])

        await container.communities.remove_pointers(a.id, parents=[b.id], peers=[c.id])

        stored = {
            community.id: community
            for community in await container.repositories.communities.get_by_ids([a.id, b.id, c.id])
        }
        assert stored[a.id].parents == [] and stored[a.id].peers == []
        assert stored[b.id].children == []
        assert stored[c.id].peers == []

    @pytest.mark.asyncio
    async def test_self_pointer_is_rejected(self, container, seed):
        a = await seed.community("A")

        with pytest.raises(BadRequestError):
            await container.communities.assign_pointers(a.id, peers=[a.id])

    @pytest.mark.asyncio
    async def test_duplicate_pointers_are_rejected(self, container, seed):
        a = await seed.community("A")
        b = await seed.community("B")

        with pytest.raises(BadRequestError, match="duplicate"):
            await container.communities.assign_pointers(a.id, parents=[b.id, b.id])

    @pytest.mark.asyncio
    async def test_unknown_pointer_is_not_found_and_nothing_is_written(self, container, seed):
        a = await seed.community("A")
        b = await seed.community("B")

        with pytest.raises(NotFoundError):
            await container.communities.assign_pointers(a.id, parents=[b.id], peers=["missing-id"])

        assert (await container.repositories.communities.get_by_id(b.id)).children == []


class TestFollowing:
    @pytest.mark.asyncio
    async def test_follow_gives_citizen_role(self, container, seed):
        community = await seed.community()
        user = await seed.member("alice", community.id)

        stored = await container.repositories.communities.get_by_id(community.id)
        assert user.id in stored.users
        assert user.roles_in(community.id) == {UserRole.CITIZEN}

    @pytest.mark.asyncio
    async def test_cannot_follow_draft_community(self, container, seed):
        await seed.admin()
        community = await seed.community(visibility=Visibility.DRAFT)
        await seed.user("alice")

        with pytest.raises(BadRequestError, match="draft"):
            await container.communities.assign_user_for_community(community.id, "alice", "alice")

    @pytest.mark.asyncio
    async def test_following_twice_is_forbidden(self, container, seed):
        community = await seed.community()
        await seed.member("alice", community.id)

        with pytest.raises(ForbiddenError):
            await container.communities.assign_user_for_community(community.id, "alice", "alice")

    @pytest.mark.asyncio
    async def test_admin_cannot_follow(self, container, seed):
        await seed.admin()
        community = await seed.community()

        with pytest.raises(ForbiddenError, match="Admin"):
            await container.communities.assign_user_for_community(community.id, "admin", "admin")

    @pytest.mark.asyncio
    async def test_other_citizen_cannot_make_someone_follow(self, container, seed):
        community = await seed.community()
        await seed.member("bob", community.id)
        await seed.user("alice")

        with pytest.raises(ForbiddenError):
            await container.communities.assign_user_for_community(community.id, "alice", "bob")

    @pytest.mark.asyncio
    async def test_unfollow_drops_roles(self, container, seed):
        community = await seed.community()
        await seed.member("alice", community.id, [UserRole.RESILIENCE_EXPERT])

        await container.communities.remove_user_of_community(community.id, "alice", "alice")

        user = await container.repositories.users.get_by_username("alice")
        assert not user.follows(community.id)
        assert (await container.repositories.communities.get_by_id(community.id)).users == []

    @pytest.mark.asyncio
    async def test_visibility_to_draft_with_followers_is_rejected(self, container, seed):
        community = await seed.community()
        await seed.member("alice", community.id)

        with pytest.raises(BadRequestError):
            await container.communities.update(community.id, {"visibility": "draft"}, "admin")

    @pytest.mark.asyncio
    async def test_citizen_sees_limited_view(self, container, seed):
        community = await seed.community()
        await seed.member("alice", community.id)

        view = await container.communities.get_community(community.id, "alice", seed.flid(community.id))

        assert set(view) == {"id", "name", "metadata"}

    @pytest.mark.asyncio
    async def test_reading_another_community_is_forbidden(self, container, seed):
        mine = await seed.community("Mine")
        other = await seed.community("Other")
        await seed.member("alice", mine.id)

        with pytest.raises(ForbiddenError):
            await container.communities.get_community(other.id, "alice", seed.flid(mine.id))

    @pytest.mark.asyncio
    async def test_followable_excludes_drafts_and_followed(self, container, seed):
        followed = await seed.community("Followed")
        await seed.community("Draft", visibility=Visibility.DRAFT)
        open_community = await seed.community("Open")
        await seed.member("alice", followed.id)

        page = await container.communities.get_communities_to_follow("alice", "alice")

        assert [item["id"] for item in page.items] == [open_community.id]


class TestProxySelection:
    @pytest.mark.asyncio
    async def test_local_manager_selects_and_deselects_proxy(self, container, seed):
        c1 = await seed.community("C1")
        p1 = await seed.resiloc_proxy("P1")
        await seed.member("manager", c1.id, [UserRole.LOCAL_MANAGER])
        flid = seed.flid(c1.id)

        community = await container.communities.select_static_proxies_for_community(c1.id, [p1.id], "manager", flid)

        instances = container.repositories.static_proxies.records
        assert len(instances) == 1
        assert instances[0].type == StaticProxyType.PROXY_OF_COMMUNITY
        assert instances[0].resiloc_proxy_id == p1.id
        assert instances[0].visibility == Visibility.DRAFT
        assert community.static_proxies == {p1.id: instances[0].id}

        community = await container.communities.select_static_proxies_for_community(c1.id, [], "manager", flid)

        assert community.static_proxies == {}
        assert container.repositories.static_proxies.records == []

    @pytest.mark.asyncio
    async def test_reselecting_keeps_existing_instance(self, container, seed):
        c1 = await seed.community("C1")
        p1 = await seed.resiloc_proxy("P1")
        p2 = await seed.resiloc_proxy("P2")
        await seed.admin()

        first = await container.communities.select_static_proxies_for_community(c1.id, [p1.id], "admin")
        second = await container.communities.select_static_proxies_for_community(c1.id, [p1.id, p2.id], "admin")

        assert second.static_proxies[p1.id] == first.static_proxies[p1.id]
        assert len(container.repositories.static_proxies.records) == 2

    @pytest.mark.asyncio
    async def test_deselect_then_select_creates_new_instance(self, container, seed):
        c1 = await seed.community("C1")
        p1 = await seed.resiloc_proxy("P1")
        await seed.admin()

        first = await container.communities.select_static_proxies_for_community(c1.id, [p1.id], "admin")
        old_id = first.static_proxies[p1.id]
        await container.communities.select_static_proxies_for_community(c1.id, [], "admin")
        again = await container.communities.select_static_proxies_for_community(c1.id, [p1.id], "admin")

        assert again.static_proxies[p1.id] != old_id

    @pytest.mark.asyncio
    async def test_draft_proxy_cannot_be_selected(self, container, seed):
        c1 = await seed.community("C1")
        draft = await seed.resiloc_proxy("Draft proxy", visibility=Visibility.DRAFT)

        with pytest.raises(BadRequestError, match="draft"):
            await container.communities.select_static_proxies_for_community(c1.id, [draft.id], "admin")

    @pytest.mark.asyncio
    async def test_duplicate_selection_is_rejected(self, container, seed):
        c1 = await seed.community("C1")
        p1 = await seed.resiloc_proxy("P1")

        with pytest.raises(BadRequestError):
            await container.communities.select_static_proxies_for_community(c1.id, [p1.id, p1.id], "admin")

    @pytest.mark.asyncio
    async def test_selection_without_flid_is_forbidden_for_members(self, container, seed):
        c1 = await seed.community("C1")
        p1 = await seed.resiloc_proxy("P1")
        await seed.member("manager", c1.id, [UserRole.LOCAL_MANAGER])

        with pytest.raises(ForbiddenError):
            await container.communities.select_static_proxies_for_community(c1.id, [p1.id], "manager")

    @pytest.mark.asyncio
    async def test_selected_sentinel_resolves_through_flid(self, container, seed):
        c1 = await seed.community("C1")
        p1 = await seed.resiloc_proxy("P1")
        await seed.member("manager", c1.id, [UserRole.LOCAL_MANAGER])

        community = await container.communities.select_static_proxies_for_community(
            "selected", [p1.id], "manager", seed.flid(c1.id)
        )

        assert community.id == c1.id
        assert p1.id in community.static_proxies


class TestCommunityRemoval:
    @pytest.mark.asyncio
    async def test_community_with_followers_cannot_be_removed(self, container, seed):
        community = await seed.community()
        await seed.member("alice", community.id)

        with pytest.raises(BadRequestError):
            await container.communities.remove(community.id)

    @pytest.mark.asyncio
    async def test_remove_deletes_owned_records_and_edges(self, container, seed):
        c1 = await seed.community("C1")
        neighbour = await seed.community("Neighbour")
        p1 = await seed.resiloc_proxy("P1")
        await container.communities.assign_pointers(c1.id, peers=[neighbour.id])
        await seed.configured_static_proxy(c1.id, p1.id)
        await container.snapshots.create(c1.id, {"name": "S1", "type": SnapshotType.SCENARIO}, "admin")

        assert await container.communities.remove(c1.id) is True

        assert await container.repositories.communities.get_by_id(c1.id) is None
        assert (await container.repositories.communities.get_by_id(neighbour.id)).peers == []
        assert container.repositories.static_proxies.records == []
        assert container.repositories.snapshots.records == []

    @pytest.mark.asyncio
    async def test_interrupted_removal_is_resumed_on_startup(self, container, seed):
        c1 = await seed.community("C1")
        p1 = await seed.resiloc_proxy("P1")
        await seed.configured_static_proxy(c1.id, p1.id)
        await container.repositories.communities.mark_deletion_started(c1.id, utc_now())

        resumed = await container.communities.resume_pending_deletions()

        assert resumed == 1
        assert await container.repositories.communities.get_by_id(c1.id) is None
        assert container.repositories.static_proxies.records == []

    @pytest.mark.asyncio
    async def test_resume_requires_pending_removal(self, container, seed):
        community = await seed.community()

        with pytest.raises(BadRequestError):
            await container.communities.resume_deletion(community.id)


class TestGraphEdgeDispatch:
    @pytest.fixture
    def repository(self):
        return AsyncMock()

    @pytest.fixture
    def service(self, repository):
        return CommunityService(
            repository=repository,
            resiloc_proxy_repository=AsyncMock(),
            resiloc_scenario_repository=AsyncMock(),
            users=AsyncMock(),
            static_proxies=AsyncMock(),
            scenarios=AsyncMock(),
            snapshots=AsyncMock(),
            identity=MagicMock(),
        )

    @pytest.mark.asyncio
    async def test_link(self, service, repository):
        await service.update_graph_edge("a", CommunityRelation.PEERS, "b", EdgeOperation.LINK)

        repository.link.assert_awaited_once_with("a", CommunityRelation.PEERS, "b")
        repository.unlink.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unlink(self, service, repository):
        await service.update_graph_edge("a", CommunityRelation.CHILDREN, "b", EdgeOperation.UNLINK)

        repository.unlink.assert_awaited_once_with("a", CommunityRelation.CHILDREN, "b")
