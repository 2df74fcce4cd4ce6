"""Integration tests for health endpoints."""
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient


class TestHealth:
    async def test_app_health(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"]

    async def test_database_connected(self, client: AsyncClient):
        response = await client.get("/api/health/database")

        assert response.status_code == 200
        data = response.json()
        assert data["connected"] is True
        assert data["timestamp"]
        assert "error" not in data

    async def test_database_failure_still_returns_200(self, client: AsyncClient):
        with patch(
            "src.domains.health.router.check_database_connection",
            AsyncMock(side_effect=RuntimeError("db down")),
        ):
            response = await client.get("/api/health/database")

        assert response.status_code == 200
        data = response.json()
        assert data["connected"] is False
        assert data["error"] == "Connection check failed"
