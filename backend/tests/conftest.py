"""
Pytest fixtures for the test database, services, and HTTP client.

Each test gets a fresh database: a temporary SQLite file by default, or
TEST_DATABASE_URL (e.g. postgresql+asyncpg://.../ticketing_test) when set.
Redis is disabled so the local admission ledger is exercised.
"""

import os
from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from ticketing.core.config import Settings
from ticketing.db.session import Database
from ticketing.main import app
from ticketing.models import Event, User
from ticketing.services.container import Services, build_services
from tests.helpers import FUTURE

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        REDIS_ENABLED=False,
        ADMISSION_STRATEGY="local",
        ADMISSION_LOCK_TIMEOUT=10.0,
    )


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Create tables, yield the database, then drop tables for isolation."""
    if TEST_DATABASE_URL:
        db = Database(TEST_DATABASE_URL)
    else:
        db = Database(
            f"sqlite+aiosqlite:///{tmp_path / 'ticketing_test.db'}",
            connect_args={"timeout": 30},
        )
    await db.create_all()

    yield db

    await db.drop_all()
    await db.dispose()


@pytest_asyncio.fixture
async def services(test_settings: Settings, database: Database) -> Services:
    return build_services(test_settings, database)


@pytest_asyncio.fixture
async def client(services: Services) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, wired to the test services."""
    app.state.services = services

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    del app.state.services


@pytest.fixture
def make_event(services: Services):
    """Factory for events; defaults to a future event with 100 tickets."""

    async def _make_event(max_tickets: int = 100, date: datetime = FUTURE, **fields) -> Event:
        data = {
            "event_name": "Test Concert",
            "location": "Test Venue",
            "date": date,
            "max_tickets": max_tickets,
            "type": "concert",
        }
        data.update(fields)
        return await services.store.create_event(data)

    return _make_event


@pytest.fixture
def make_user(services: Services):
    async def _make_user(name: str = "Test User", rol: str = "customer") -> User:
        return await services.store.create_user({
            "name": name,
            "rol": rol,
            "email": f"{name.lower().replace(' ', '.')}@example.com",
            "password": "opaque-credential",
        })

    return _make_user


@pytest_asyncio.fixture
async def test_user(make_user) -> User:
    return await make_user()


@pytest_asyncio.fixture
async def test_event(make_event) -> Event:
    return await make_event()
