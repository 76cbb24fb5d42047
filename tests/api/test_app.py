"""HTTP surface tests: authentication, error bodies and a few routes."""

import httpx
import pytest
from jose import jwt

from resiloc_inventory.api.app import create_app


class TestInventoryApi:
    @pytest.fixture
    def app(self, settings, container):
        return create_app(settings, container)

    @pytest.fixture
    def client(self, app):
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")

    @pytest.fixture
    def token_for(self, settings):
        secret = settings.jwt_public_key.get_secret_value()

        def make(username):
            token = jwt.encode({"username": username}, secret, algorithm="HS256")
            return {"Authorization": f"Bearer {token}"}

        return make

    @pytest.mark.asyncio
    async def test_health(self, client):
        async with client:
            response = await client.get("/inventory/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        async with client:
            response = await client.get("/inventory/api/communities")

        assert response.status_code == 401
        assert response.json()["error"]["type"] == "AuthenticationError"

    @pytest.mark.asyncio
    async def test_token_with_wrong_signature(self, client):
        token = jwt.encode({"username": "admin"}, "another-secret", algorithm="HS256")

        async with client:
            response = await client.get(
                "/inventory/api/communities", headers={"Authorization": f"Bearer {token}"}
            )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_routes_reject_other_accounts(self, client, seed, token_for):
        await seed.user("alice")

        async with client:
            response = await client.get("/inventory/api/communities", headers=token_for("alice"))

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Forbidden resource"

    @pytest.mark.asyncio
    async def test_admin_creates_and_lists_communities(self, client, seed, token_for):
        await seed.admin()

        async with client:
            created = await client.post(
                "/inventory/api/communities",
                json={"name": "Riverside", "visibility": "community", "metadata": {"description": "Delta towns"}},
                headers=token_for("admin"),
            )
            listed = await client.get("/inventory/api/communities", headers=token_for("admin"))

        assert created.status_code == 201
        body = created.json()
        assert body["data"]["name"] == "Riverside"
        assert body["data"]["metadata"]["description"] == "Delta towns"
        assert [item["name"] for item in listed.json()["items"]] == ["Riverside"]

    @pytest.mark.asyncio
    async def test_request_validation_error_shape(self, client, seed, token_for):
        await seed.admin()

        async with client:
            response = await client.post(
                "/inventory/api/communities", json={"visibility": "everyone"}, headers=token_for("admin")
            )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "ValidationError"
        assert error["details"]["errors"]

    @pytest.mark.asyncio
    async def test_unknown_community(self, client, seed, token_for):
        await seed.admin()

        async with client:
            response = await client.get("/inventory/api/communities/missing-id", headers=token_for("admin"))

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "NotFoundError"

    @pytest.mark.asyncio
    async def test_registration_is_public(self, client, container):
        async with client:
            response = await client.post(
                "/inventory/api/users",
                json={"username": "Alice", "email": "alice@example.org", "password": "secret", "firstName": "alice"},
            )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["username"] == "alice"
        assert data["firstName"] == "Alice"
        assert "passwordHash" not in data
        assert await container.repositories.users.get_by_username("alice") is not None
