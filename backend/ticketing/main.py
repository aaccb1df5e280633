"""
Ticket Booking API - Main Application Entry Point

Registers events and users and issues tickets without ever selling more
than an event's max_tickets:
- Per-event admission locks (in-process or Redis) around a single
  count-and-insert transaction
- Redis caching of immutable event lookups
- Structured logging with request correlation
- Prometheus metrics for reservation outcomes and lock contention
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ticketing.api.errors import register_exception_handlers
from ticketing.api.middleware import RequestLoggingMiddleware
from ticketing.api.router import api_router
from ticketing.core.config import get_settings
from ticketing.core.logging import get_logger, setup_logging
from ticketing.core.metrics import metrics_endpoint
from ticketing.db.session import create_database
from ticketing.infrastructure import close_redis, create_redis
from ticketing.services.container import build_services

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: owns the database pool and Redis client."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        admission_strategy=settings.ADMISSION_STRATEGY,
    )

    database = create_database(settings)
    if settings.DB_CREATE_TABLES:
        await database.create_all()

    redis_client = await create_redis(settings)
    if redis_client is None:
        logger.warning("redis_unavailable", message="Running without cache or shared locks")

    app.state.services = build_services(settings, database, redis_client)
    logger.info("application_ready", ledger=app.state.services.ledger.strategy)

    yield

    await close_redis(redis_client)
    await database.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event ticket booking API with capacity-safe reservations",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    services = app.state.services
    cache_stats = await services.cache.stats() if services.cache else {"status": "disabled"}
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "admission_strategy": services.ledger.strategy,
        "cache": cache_stats,
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
