"""Tests for snapshots and the static proxies they hold."""

import pytest

from resiloc_inventory.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from resiloc_inventory.features.catalog.entities.enums import (
    SnapshotType,
    StaticProxyType,
    SubmissionStatus,
    Visibility,
)
from resiloc_inventory.features.users.entities.user import UserRole


@pytest.fixture
def community_setup(container, seed):
    """Community with one configured proxy, a local manager and an empty snapshot."""

    async def build(**configuration):
        community = await seed.community("C1")
        await seed.member("manager", community.id, [UserRole.LOCAL_MANAGER])
        resiloc_proxy = await seed.resiloc_proxy("P1")
        configured = await seed.configured_static_proxy(community.id, resiloc_proxy.id, **configuration)
        flid = seed.flid(community.id)
        snapshot = await container.snapshots.create(
            community.id, {"name": "Spring 2021", "type": SnapshotType.EVOLUTION}, "manager", flid
        )
        return community, configured, snapshot, flid

    return build


class TestSnapshotAssignment:
    @pytest.mark.asyncio
    async def test_create_records_snapshot_on_community(self, container, community_setup):
        community, _, snapshot, _ = await community_setup()

        assert snapshot.status == SubmissionStatus.ON_HOLD
        assert (await container.repositories.communities.get_by_id(community.id)).snapshots == [snapshot.id]

    @pytest.mark.asyncio
    async def test_outsider_cannot_create_snapshot(self, container, seed):
        community = await seed.community("C1")
        other = await seed.community("Other")
        await seed.member("manager", other.id, [UserRole.LOCAL_MANAGER])

        with pytest.raises(ForbiddenError):
            await container.snapshots.create(
                community.id, {"name": "S", "type": "scenario"}, "manager", seed.flid(other.id)
            )

    @pytest.mark.asyncio
    async def test_unknown_snapshot_type_is_a_bad_request(self, container, community_setup):
        community, _, snapshot, flid = await community_setup()

        with pytest.raises(BadRequestError, match="snapshot type"):
            await container.snapshots.create(community.id, {"name": "S", "type": "forecast"}, "manager", flid)
        with pytest.raises(BadRequestError, match="snapshot type"):
            await container.snapshots.update(snapshot.id, {"type": "forecast"}, "manager", flid)

    @pytest.mark.asyncio
    async def test_assign_clones_configuration(self, container, seed, community_setup):
        _, configured, snapshot, flid = await community_setup()

        updated = await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id,
            [{"static_proxy_id": configured.id, "value": 42, "metadata": seed.required_values()}],
            "manager",
            flid,
        )

        [clone_id] = updated.static_proxy_ids
        clone = await container.repositories.static_proxies.get_by_id(clone_id)
        assert clone.id != configured.id
        assert clone.type == StaticProxyType.PROXY_OF_SNAPSHOT
        assert clone.value == 42
        assert (clone.min_target, clone.max_target) == (0, 100)
        assert clone.metadata.get("dateOfData").value == "2021-03-01"
        source = await container.repositories.static_proxies.get_by_id(configured.id)
        assert not source.metadata.get("dateOfData").has_value()

    @pytest.mark.asyncio
    async def test_draft_configuration_cannot_be_assigned(self, container, community_setup):
        _, configured, snapshot, flid = await community_setup(visibility=Visibility.DRAFT)

        with pytest.raises(BadRequestError, match="draft"):
            await container.snapshots.assign_static_proxies_for_snapshot(
                snapshot.id, [{"static_proxy_id": configured.id, "value": 1}], "manager", flid
            )

    @pytest.mark.asyncio
    async def test_value_outside_targets(self, container, community_setup):
        _, configured, snapshot, flid = await community_setup()

        with pytest.raises(BadRequestError, match="max target"):
            await container.snapshots.assign_static_proxies_for_snapshot(
                snapshot.id, [{"static_proxy_id": configured.id, "value": 101}], "manager", flid
            )

    @pytest.mark.asyncio
    async def test_static_metadata_cannot_be_supplied(self, container, community_setup):
        _, configured, snapshot, flid = await community_setup()

        with pytest.raises(BadRequestError, match="static field"):
            await container.snapshots.assign_static_proxies_for_snapshot(
                snapshot.id,
                [{"static_proxy_id": configured.id, "value": 1, "metadata": {"tooltip": {"value": "x"}}}],
                "manager",
                flid,
            )

    @pytest.mark.asyncio
    async def test_one_static_proxy_per_template(self, container, community_setup):
        _, configured, snapshot, flid = await community_setup()
        entry = {"static_proxy_id": configured.id, "value": 5}
        await container.snapshots.assign_static_proxies_for_snapshot(snapshot.id, [entry], "manager", flid)

        with pytest.raises(BadRequestError, match="was added"):
            await container.snapshots.assign_static_proxies_for_snapshot(snapshot.id, [entry], "manager", flid)

    @pytest.mark.asyncio
    async def test_configuration_of_another_community(self, container, seed, community_setup):
        _, _, snapshot, flid = await community_setup()
        other = await seed.community("Other")
        foreign = await seed.configured_static_proxy(other.id, (await seed.resiloc_proxy("P2")).id)

        with pytest.raises(BadRequestError, match="does not exist in community"):
            await container.snapshots.assign_static_proxies_for_snapshot(
                snapshot.id, [{"static_proxy_id": foreign.id, "value": 1}], "admin"
            )

    @pytest.mark.asyncio
    async def test_remove_static_proxies_from_snapshot(self, container, community_setup):
        _, configured, snapshot, flid = await community_setup()
        assigned = await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id, [{"static_proxy_id": configured.id, "value": 5}], "manager", flid
        )
        [clone_id] = assigned.static_proxy_ids

        updated = await container.snapshots.remove_static_proxies_from_snapshot(
            snapshot.id, [clone_id], "manager", flid
        )

        assert updated.static_proxy_ids == []
        assert await container.repositories.static_proxies.get_by_id(clone_id) is None
        with pytest.raises(NotFoundError):
            await container.snapshots.remove_static_proxies_from_snapshot(snapshot.id, [clone_id], "manager", flid)


class TestSnapshotSubmission:
    @pytest.mark.asyncio
    async def test_submit_freezes_snapshot(self, container, seed, community_setup):
        _, configured, snapshot, flid = await community_setup()
        await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id,
            [{"static_proxy_id": configured.id, "value": 50, "metadata": seed.required_values()}],
            "manager",
            flid,
        )

        submitted = await container.snapshots.submit_snapshot(snapshot.id, "manager", flid)

        assert submitted.status == SubmissionStatus.SUBMITTED
        assert submitted.date_submitted is not None
        with pytest.raises(BadRequestError, match="already submitted"):
            await container.snapshots.submit_snapshot(snapshot.id, "manager", flid)
        with pytest.raises(BadRequestError):
            await container.snapshots.update(snapshot.id, {"name": "Renamed"}, "manager", flid)
        with pytest.raises(BadRequestError):
            await container.snapshots.assign_static_proxies_for_snapshot(
                snapshot.id, [{"static_proxy_id": configured.id, "value": 1}], "manager", flid
            )

    @pytest.mark.asyncio
    async def test_submit_needs_required_metadata(self, container, community_setup):
        _, configured, snapshot, flid = await community_setup()
        await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id, [{"static_proxy_id": configured.id, "value": 50}], "manager", flid
        )

        with pytest.raises(BadRequestError, match="required field"):
            await container.snapshots.submit_snapshot(snapshot.id, "manager", flid)

        stored = await container.repositories.snapshots.get_by_id(snapshot.id)
        assert stored.status == SubmissionStatus.ON_HOLD

    @pytest.mark.asyncio
    async def test_submit_needs_values(self, container, seed, community_setup):
        _, configured, snapshot, flid = await community_setup()
        await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id,
            [{"static_proxy_id": configured.id, "metadata": seed.required_values()}],
            "manager",
            flid,
        )

        with pytest.raises(BadRequestError, match="empty"):
            await container.snapshots.submit_snapshot(snapshot.id, "manager", flid)

    @pytest.mark.asyncio
    async def test_update_fills_in_values_before_submission(self, container, seed, community_setup):
        _, configured, snapshot, flid = await community_setup()
        assigned = await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id, [{"static_proxy_id": configured.id}], "manager", flid
        )
        [clone_id] = assigned.static_proxy_ids

        await container.snapshots.update(
            snapshot.id,
            {
                "description": "Values after the spring survey",
                "static_proxies": [{"static_proxy_id": clone_id, "value": 12, "metadata": seed.required_values()}],
            },
            "manager",
            flid,
        )
        submitted = await container.snapshots.submit_snapshot(snapshot.id, "manager", flid)

        assert submitted.description == "Values after the spring survey"
        assert (await container.repositories.static_proxies.get_by_id(clone_id)).value == 12

    @pytest.mark.asyncio
    async def test_update_rejects_foreign_static_proxy(self, container, community_setup):
        _, configured, snapshot, flid = await community_setup()

        with pytest.raises(NotFoundError):
            await container.snapshots.update(
                snapshot.id, {"static_proxies": [{"static_proxy_id": configured.id, "value": 1}]}, "manager", flid
            )

    @pytest.mark.asyncio
    async def test_remove_deletes_clones(self, container, community_setup):
        community, configured, snapshot, flid = await community_setup()
        await container.snapshots.assign_static_proxies_for_snapshot(
            snapshot.id, [{"static_proxy_id": configured.id, "value": 5}], "manager", flid
        )

        assert await container.snapshots.remove(snapshot.id, "manager", flid) is True

        assert [sp.id for sp in container.repositories.static_proxies.records] == [configured.id]
        assert (await container.repositories.communities.get_by_id(community.id)).snapshots == []
