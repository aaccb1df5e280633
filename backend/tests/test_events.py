"""
Tests for event endpoints.
"""

import pytest
from httpx import AsyncClient

from tests.helpers import PAST

EVENT_PAYLOAD = {
    "event_name": "Python Conference",
    "location": "Convention Center",
    "date": "2099-05-01 09:00:00",
    "max_tickets": 500,
    "type": "conference",
}


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient):
    response = await client.post("/event", json=EVENT_PAYLOAD)
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Event created successfully!"
    assert isinstance(data["id"], int)


@pytest.mark.asyncio
async def test_create_event_missing_fields(client: AsyncClient):
    response = await client.post("/event", json={"event_name": "Incomplete"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "MISSING_FIELD"
    assert "location" in data["detail"]
    assert "max_tickets" in data["detail"]


@pytest.mark.asyncio
async def test_create_event_invalid_json(client: AsyncClient):
    response = await client.post(
        "/event",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "INVALID_FIELD", "detail": "Invalid JSON format"}


@pytest.mark.asyncio
async def test_create_event_empty_body(client: AsyncClient):
    response = await client.post("/event")
    assert response.status_code == 400
    assert response.json()["error"] == "MISSING_FIELD"


@pytest.mark.asyncio
async def test_create_event_negative_capacity(client: AsyncClient):
    response = await client.post("/event", json={**EVENT_PAYLOAD, "max_tickets": -3})
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_FIELD"


@pytest.mark.asyncio
async def test_create_event_bad_date(client: AsyncClient):
    response = await client.post("/event", json={**EVENT_PAYLOAD, "date": "next friday"})
    assert response.status_code == 400
    assert "date" in response.json()["detail"]


@pytest.mark.asyncio
async def test_get_event(client: AsyncClient):
    created = await client.post("/event", json=EVENT_PAYLOAD)
    event_id = created.json()["id"]

    response = await client.get("/event", params={"event_id": event_id})
    assert response.status_code == 200
    assert response.json() == {"id": event_id, **EVENT_PAYLOAD}


@pytest.mark.asyncio
async def test_get_event_missing_param(client: AsyncClient):
    response = await client.get("/event")
    assert response.status_code == 400
    assert response.json()["error"] == "MISSING_FIELD"


@pytest.mark.asyncio
async def test_get_event_not_found(client: AsyncClient):
    response = await client.get("/event", params={"event_id": 99999})
    assert response.status_code == 400
    assert response.json() == {"error": "EVENT_NOT_FOUND", "detail": "Event id does not exist"}


@pytest.mark.asyncio
async def test_get_event_non_integer_id(client: AsyncClient):
    response = await client.get("/event", params={"event_id": "abc"})
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_ID"


@pytest.mark.asyncio
async def test_list_current_events(client: AsyncClient, make_event):
    await make_event(event_name="Finished", date=PAST)
    upcoming = await make_event(event_name="Upcoming")

    response = await client.get("/event/current")
    assert response.status_code == 200
    data = response.json()
    assert [e["id"] for e in data] == [upcoming.id]
    assert data[0]["date"] == "2099-06-01 20:00:00"


@pytest.mark.asyncio
async def test_list_current_events_empty(client: AsyncClient):
    response = await client.get("/event/current")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_list_event_tickets(client: AsyncClient, test_user, test_event):
    await client.post("/ticket", params={"user_id": test_user.id, "event_id": test_event.id})

    response = await client.get("/event/tickets", params={"event_id": test_event.id})
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["user_id"] == test_user.id
