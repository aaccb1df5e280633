"""
Wiring for the booking core.

Everything here is built once per application lifespan from an explicitly
owned Database (and optional Redis client) and shared by all requests.
"""

from dataclasses import dataclass
from typing import Optional

import redis.asyncio as redis

from ticketing.core.config import Settings
from ticketing.db.session import Database
from ticketing.services.cache_service import EventCache
from ticketing.services.entity_store import EntityStore
from ticketing.services.interfaces import CapacityLedger
from ticketing.services.query_service import QueryService
from ticketing.services.reservation_service import ReservationEngine
from ticketing.services.strategy_factory import create_ledger


@dataclass
class Services:
    database: Database
    store: EntityStore
    ledger: CapacityLedger
    reservations: ReservationEngine
    queries: QueryService
    cache: Optional[EventCache] = None


def build_services(
    settings: Settings,
    database: Database,
    redis_client: Optional[redis.Redis] = None,
) -> Services:
    store = EntityStore(database)
    ledger = create_ledger(settings, database, store, redis_client)
    cache = EventCache(redis_client, settings.EVENT_CACHE_TTL) if redis_client is not None else None
    return Services(
        database=database,
        store=store,
        ledger=ledger,
        reservations=ReservationEngine(store, ledger),
        queries=QueryService(store, cache),
        cache=cache,
    )
