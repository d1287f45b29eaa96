"""
Engine and session-factory construction.

Nothing here runs at import time: the application factory builds the engine
and the session factory once from `Settings` and passes them around
explicitly (see `main.create_app` and `core.dependencies`).
"""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from intern_registry.config.settings import Settings
from intern_registry.database.base import Base

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the AsyncEngine described by `settings.DATABASE_URL`."""
    options = {"echo": settings.SQLALCHEMY_ECHO}
    if not settings.DATABASE_URL.startswith("sqlite"):
        # Connection health checks only make sense for pooled network connections.
        options["pool_pre_ping"] = True
    return create_async_engine(settings.DATABASE_URL, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned entities stay readable after the service commits.
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables (and the unique index on interns.email)."""
    # Import models so they register themselves on Base.metadata.
    from intern_registry import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("db.tables_ready", extra={"tables": sorted(Base.metadata.tables)})
