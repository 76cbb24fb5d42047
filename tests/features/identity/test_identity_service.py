"""Tests for the flid cipher and caller role resolution."""

import pytest

from resiloc_inventory.core.exceptions import BadRequestError, InvalidArgumentError
from resiloc_inventory.features.identity import FlidCipher
from resiloc_inventory.features.users.entities.user import UserRole


class TestFlidCipher:
    @pytest.fixture
    def cipher(self):
        return FlidCipher("test-salt")

    def test_round_trip(self, cipher):
        community_id = "5f0c3c1e-8d6a-4b6f-9a57-0f5d2a1c9e11"

        encoded = cipher.cipher(community_id)

        assert encoded != community_id
        assert len(encoded) == 2 * len(community_id)
        assert cipher.decipher(encoded) == community_id

    def test_encoding_is_deterministic(self, cipher):
        assert cipher.cipher("abc") == cipher.cipher("abc")

    def test_different_salt_gives_different_encoding(self, cipher):
        assert FlidCipher("other").cipher("abc") != cipher.cipher("abc")

    @pytest.mark.parametrize("flid", ["", "abc", "zz11"])
    def test_malformed_flid(self, cipher, flid):
        with pytest.raises(InvalidArgumentError):
            cipher.decipher(flid)

    def test_empty_salt_is_rejected(self):
        with pytest.raises(ValueError):
            FlidCipher("")


class TestIdentityService:
    @pytest.mark.asyncio
    async def test_admin_roles_by_flid(self, container, seed):
        await seed.admin()

        assert await container.identity.get_user_roles_by_flid("admin", None) == [UserRole.ADMIN]

    @pytest.mark.asyncio
    async def test_roles_by_flid_need_flid(self, container, seed):
        await seed.user("alice")

        with pytest.raises(BadRequestError):
            await container.identity.get_user_roles_by_flid("alice", None)

    @pytest.mark.asyncio
    async def test_flid_that_is_not_a_community_id(self, container, seed):
        await seed.user("alice")

        with pytest.raises(BadRequestError, match="not valid"):
            await container.identity.get_user_roles_by_flid("alice", seed.flid("not-a-uuid"))

    @pytest.mark.asyncio
    async def test_roles_by_flid_in_declaration_order(self, container, seed):
        community = await seed.community()
        await seed.member("alice", community.id, [UserRole.LOCAL_MANAGER, UserRole.RESILIENCE_EXPERT])

        roles = await container.identity.get_user_roles_by_flid("alice", seed.flid(community.id))

        assert roles == [UserRole.RESILIENCE_EXPERT, UserRole.LOCAL_MANAGER, UserRole.CITIZEN]

    @pytest.mark.asyncio
    async def test_citizen_only_when_no_other_role(self, container, seed):
        community = await seed.community()
        await seed.member("alice", community.id)
        await seed.member("bob", community.id, [UserRole.RESILIENCE_EXPERT])

        assert await container.identity.is_citizen("alice", community.id)
        assert not await container.identity.is_citizen("bob", community.id)

    def test_selected_sentinel(self, container, seed):
        community_id = "5f0c3c1e-8d6a-4b6f-9a57-0f5d2a1c9e11"

        assert container.identity.resolve_community_id("selected", seed.flid(community_id)) == community_id
        assert container.identity.resolve_community_id(community_id, None) == community_id
        with pytest.raises(BadRequestError):
            container.identity.resolve_community_id("selected", None)

    def test_flid_matching(self, container, seed):
        community_id = "5f0c3c1e-8d6a-4b6f-9a57-0f5d2a1c9e11"

        assert container.identity.is_community_id_matching_with_flid(community_id, seed.flid(community_id))
        assert not container.identity.is_community_id_matching_with_flid(community_id, None)
        assert not container.identity.is_community_id_matching_with_flid(None, seed.flid(community_id))
