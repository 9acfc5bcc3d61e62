# tests/routes/test_main.py
"""Tests for app-level endpoints, error shaping and middleware."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from postdesk.main import app


class TestHealth:
    async def test_health_reports_database(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] == "connected"
        assert data["version"] == app.version
        assert data["timestamp"]

    async def test_health_degraded_when_database_unreachable(self, client: AsyncClient) -> None:
        with patch("postdesk.main.ping_db", AsyncMock(return_value=False)):
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unreachable"


async def test_root_welcome(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == f"Welcome to the {app.title}"


class TestErrorShaping:
    async def test_unknown_route(self, client: AsyncClient) -> None:
        response = await client.get("/nope")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Route not found: GET /nope"}

    async def test_method_not_allowed(self, client: AsyncClient) -> None:
        response = await client.patch("/posts")

        assert response.status_code == 405
        assert response.json() == {"success": False, "error": "Method Not Allowed"}


class TestMiddleware:
    async def test_security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "max-age" in response.headers["Strict-Transport-Security"]

    async def test_request_id_is_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    async def test_request_id_is_generated(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert len(response.headers["X-Request-ID"]) == 32


async def test_openapi_documents_post_routes(client: AsyncClient) -> None:
    response = await client.get("/openapi.json")

    paths = response.json()["paths"]
    assert "/posts/{id_or_slug}" in paths
    assert "/posts/{post_id}/image" in paths
    assert "multipart/form-data" in paths["/posts"]["post"]["requestBody"]["content"]
