# tests/routes/test_categories.py
"""Tests for the category API endpoints."""

from httpx import AsyncClient

from postdesk.models import CategoryDB


class TestListCategories:
    async def test_public_and_sorted_by_name(
        self,
        client: AsyncClient,
        admin_auth_headers: dict[str, str],
    ) -> None:
        for name in ("Travel", "Food", "Tech"):
            response = await client.post("/categories", json={"name": name}, headers=admin_auth_headers)
            assert response.status_code == 201

        response = await client.get("/categories")

        assert response.status_code == 200
        assert [item["name"] for item in response.json()["data"]] == ["Food", "Tech", "Travel"]


class TestCreateCategory:
    async def test_admin_creates_category(
        self,
        client: AsyncClient,
        admin_auth_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/categories",
            json={"name": "  Home & Garden ", "description": "Indoors and out"},
            headers=admin_auth_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Home & Garden"
        assert data["slug"] == "home-garden"
        assert data["description"] == "Indoors and out"
        assert "createdAt" in data

    async def test_regular_user_is_forbidden(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
    ) -> None:
        response = await client.post("/categories", json={"name": "Tech"}, headers=auth_headers)

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Admin access required"}

    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.post("/categories", json={"name": "Tech"})

        assert response.status_code == 401

    async def test_duplicate_name(
        self,
        client: AsyncClient,
        category: CategoryDB,
        admin_auth_headers: dict[str, str],
    ) -> None:
        response = await client.post("/categories", json={"name": "Tech"}, headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Category with this name already exists"

    async def test_name_clashing_on_slug(
        self,
        client: AsyncClient,
        category: CategoryDB,
        admin_auth_headers: dict[str, str],
    ) -> None:
        response = await client.post("/categories", json={"name": "TECH!"}, headers=admin_auth_headers)

        assert response.status_code == 400

    async def test_empty_name(self, client: AsyncClient, admin_auth_headers: dict[str, str]) -> None:
        response = await client.post("/categories", json={"name": "   "}, headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("name:")

    async def test_non_ascii_name(
        self,
        client: AsyncClient,
        admin_auth_headers: dict[str, str],
    ) -> None:
        response = await client.post("/categories", json={"name": "旅行"}, headers=admin_auth_headers)

        assert response.status_code == 201
        assert response.json()["data"]["name"] == "旅行"
        assert response.json()["data"]["slug"] == "category"
