"""
Tests for health, root and metrics endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["admission_strategy"] == "local"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_metrics_track_reservations(client: AsyncClient, test_user, test_event):
    await client.post("/ticket", params={"user_id": test_user.id, "event_id": test_event.id})

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "ticket_reservations_total" in response.text
    assert 'status="reserved"' in response.text
