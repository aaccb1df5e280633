"""
Database engine and session factory, owned by the application lifespan.

A Database is created once at startup and handed to every component that
needs storage. There is no module-level engine: tests and tools build their
own instance against whatever URL they need.
"""

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ticketing.core.config import Settings
from ticketing.core.logging import get_logger
from ticketing.db.base import Base

logger = get_logger(__name__)


class Database:
    def __init__(self, url: str, echo: bool = False, **engine_kwargs) -> None:
        self.url = make_url(url)
        self.engine = create_async_engine(url, echo=echo, **engine_kwargs)
        if self.is_sqlite:
            _configure_sqlite(self.engine)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == "sqlite"

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create tables. For development and tests; use Alembic in production."""
        from ticketing import models  # noqa: F401 - register tables on Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def _configure_sqlite(engine) -> None:
    """
    SQLite only allows one writer. Opening every transaction with
    BEGIN IMMEDIATE makes concurrent writers queue on the busy timeout
    instead of failing with "database is locked" on lock upgrade.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_database(settings: Settings) -> Database:
    url = make_url(settings.DATABASE_URL)
    engine_kwargs = {}
    if url.get_backend_name() == "sqlite":
        engine_kwargs["connect_args"] = {"timeout": settings.DB_POOL_TIMEOUT}
    else:
        engine_kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )

    database = Database(settings.DATABASE_URL, echo=settings.DEBUG, **engine_kwargs)
    logger.info("database_configured", backend=url.get_backend_name(), database=url.database)
    return database
