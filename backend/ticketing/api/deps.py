"""
FastAPI dependencies resolving the lifespan-owned services.
"""

from fastapi import Request

from ticketing.services.container import Services
from ticketing.services.query_service import QueryService
from ticketing.services.reservation_service import ReservationEngine
from ticketing.services.entity_store import EntityStore


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_store(request: Request) -> EntityStore:
    return get_services(request).store


def get_queries(request: Request) -> QueryService:
    return get_services(request).queries


def get_reservations(request: Request) -> ReservationEngine:
    return get_services(request).reservations
