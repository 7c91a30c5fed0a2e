"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/health returns 200, status ok and table sizes."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "resources": 0, "users": 1}


async def test_favicon_is_empty(client: AsyncClient) -> None:
    response = await client.get("/favicon.ico")
    assert response.status_code == 204
