"""
Integration tests for prompt template endpoints.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestPromptTemplates:

    async def test_import_defaults_once(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post("/api/v1/prompts/import-defaults", headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["data"]["count"] == 5

        response = await async_client.post("/api/v1/prompts/import-defaults", headers=admin_headers)
        assert response.json()["data"] == {"count": 0, "prompt_ids": []}

        listing = await async_client.get("/api/v1/prompts/?content_type=tip", headers=admin_headers)
        assert [p["name"] for p in listing.json()["data"]["prompts"]] == ["Default tip"]

    async def test_crud_flow(self, async_client: AsyncClient, creator_headers, category):
        response = await async_client.post(
            "/api/v1/prompts/",
            headers=creator_headers,
            json={"name": "Bound", "category": category["id"], "template": "Write {count} items on {category}"},
        )
        assert response.status_code == 201
        prompt_id = response.json()["data"]["prompt"]["id"]

        response = await async_client.patch(
            f"/api/v1/prompts/{prompt_id}", headers=creator_headers, json={"active": False}
        )
        assert response.json()["data"]["prompt"]["active"] is False

        response = await async_client.get(f"/api/v1/prompts/{prompt_id}", headers=creator_headers)
        assert response.json()["data"]["prompt"]["name"] == "Bound"

        response = await async_client.delete(f"/api/v1/prompts/{prompt_id}", headers=creator_headers)
        assert response.status_code == 200

        response = await async_client.get(f"/api/v1/prompts/{prompt_id}", headers=creator_headers)
        assert response.status_code == 404

    async def test_unknown_placeholder_rejected(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(
            "/api/v1/prompts/", headers=admin_headers, json={"name": "Bad", "template": "About {topic}"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_positional_placeholder_rejected(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(
            "/api/v1/prompts/",
            headers=admin_headers,
            json={"name": "Bad", "template": "Generate {count} items about {category}. Format: {}"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_update_with_bad_template(self, async_client: AsyncClient, admin_headers):
        created = await async_client.post(
            "/api/v1/prompts/", headers=admin_headers, json={"name": "Ok", "template": "About {category}"}
        )
        prompt_id = created.json()["data"]["prompt"]["id"]

        response = await async_client.patch(
            f"/api/v1/prompts/{prompt_id}", headers=admin_headers, json={"template": "About {nope}"}
        )
        assert response.status_code == 400

    async def test_unknown_category(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(
            "/api/v1/prompts/", headers=admin_headers, json={"name": "X", "category": "nope", "template": "T"}
        )
        assert response.status_code == 404

    async def test_users_forbidden(self, async_client: AsyncClient, auth_headers):
        response = await async_client.get("/api/v1/prompts/", headers=auth_headers)
        assert response.status_code == 403
