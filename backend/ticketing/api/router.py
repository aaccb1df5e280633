"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from ticketing.api.routes import events, tickets, users

api_router = APIRouter()
api_router.include_router(events.router)
api_router.include_router(users.router)
api_router.include_router(tickets.router)
