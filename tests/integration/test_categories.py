"""
Integration tests for category endpoints.
"""

import pytest
from httpx import AsyncClient

from app.crud.category import CategoryCRUD
from app.models.category import CategoryModel

pytestmark = pytest.mark.asyncio


class TestListCategories:

    async def test_users_see_active_only(self, async_client: AsyncClient, auth_headers, store, category):
        CategoryCRUD(store).create_category(CategoryModel(name="Hidden", active=False))

        response = await async_client.get("/api/v1/categories/", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [c["slug"] for c in data["categories"]] == ["productivity"]

    async def test_staff_see_everything(self, async_client: AsyncClient, admin_headers, store, category):
        CategoryCRUD(store).create_category(CategoryModel(name="Hidden", active=False))
        response = await async_client.get("/api/v1/categories/", headers=admin_headers)
        assert response.json()["data"]["results"] == 2

    async def test_get_inactive_category_as_user(self, async_client: AsyncClient, auth_headers, store):
        hidden = CategoryCRUD(store).create_category(CategoryModel(name="Hidden", active=False))
        response = await async_client.get(f"/api/v1/categories/{hidden['id']}", headers=auth_headers)
        assert response.status_code == 404

    async def test_pool_stats(self, async_client: AsyncClient, auth_headers, make_content, category):
        make_content(pool="accepted")
        make_content(pool="accepted")
        make_content(pool="disliked")

        response = await async_client.get("/api/v1/categories/stats/pools", headers=auth_headers)

        stats = response.json()["data"]["stats"]
        assert stats[0]["category"]["id"] == category["id"]
        assert stats[0]["pools"]["accepted"] == 2
        assert stats[0]["pools"]["disliked"] == 1
        assert stats[0]["pools"]["premium"] == 0
        assert stats[0]["total"] == 3


class TestManageCategories:

    async def test_create_category(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(
            "/api/v1/categories/",
            headers=admin_headers,
            json={"name": "Home & Garden", "content_type": "tip"},
        )

        assert response.status_code == 201
        category = response.json()["data"]["category"]
        assert category["slug"] == "home-garden"
        assert category["content_type"] == "tip"

    async def test_duplicate_slug(self, async_client: AsyncClient, admin_headers, category):
        response = await async_client.post("/api/v1/categories/", headers=admin_headers, json={"name": "Productivity"})
        assert response.status_code == 409

    async def test_users_cannot_create(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post("/api/v1/categories/", headers=auth_headers, json={"name": "Nope"})
        assert response.status_code == 403

    async def test_update_slug_conflict(self, async_client: AsyncClient, admin_headers, store, category):
        other = CategoryCRUD(store).create_category(CategoryModel(name="Cooking"))
        response = await async_client.patch(
            f"/api/v1/categories/{other['id']}", headers=admin_headers, json={"slug": "Productivity"}
        )
        assert response.status_code == 409

    async def test_update_category(self, async_client: AsyncClient, admin_headers, category):
        response = await async_client.patch(
            f"/api/v1/categories/{category['id']}",
            headers=admin_headers,
            json={"description": "New text", "default_num_to_generate": 8},
        )
        updated = response.json()["data"]["category"]
        assert updated["description"] == "New text"
        assert updated["default_num_to_generate"] == 8

    async def test_update_nulls(self, async_client: AsyncClient, admin_headers, store, category):
        response = await async_client.patch(
            f"/api/v1/categories/{category['id']}",
            headers=admin_headers,
            json={"name": None, "active": None, "prompt": None},
        )

        assert response.status_code == 200
        stored = CategoryCRUD(store).get_by_id(category["id"])
        assert stored["name"] == "Productivity"
        assert stored["active"] is True
        assert stored["prompt"] is None

    async def test_delete_in_use(self, async_client: AsyncClient, admin_headers, make_content, category):
        make_content()
        response = await async_client.delete(f"/api/v1/categories/{category['id']}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["error"]["details"]["content_count"] == 1

    async def test_delete_unused(self, async_client: AsyncClient, admin_headers, category, store):
        response = await async_client.delete(f"/api/v1/categories/{category['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert CategoryCRUD(store).get_by_id(category["id"]) is None

    async def test_activate_all(self, async_client: AsyncClient, admin_headers, store):
        crud = CategoryCRUD(store)
        for name in ("A", "B"):
            crud.create_category(CategoryModel(name=name, active=False))

        response = await async_client.post("/api/v1/categories/activate-all", headers=admin_headers)

        assert response.json()["data"] == {"activated_count": 2}
        assert all(c["active"] for c in crud.list_categories())
