"""
Core pytest configuration for the entire test suite.

Only the pieces every kind of test needs live here: noisy-logger tuning,
application logging, and the database engine/session fixtures. Domain
fixtures (repositories, services, API client) live in
tests/test_fixtures/ and are re-exported at the bottom of this module so
every test module can use them without importing.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the project imports: it runs before SQLAlchemy or
# httpx create their loggers, which keeps collection output quiet.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
    "urllib3",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine,
)

from intern_registry.config.settings import Settings
from intern_registry.core.logging.builder import setup_logging, stop_queue_logging
from intern_registry.database.base import Base
from intern_registry import models  # noqa: F401 - registers Intern on Base.metadata

logger = logging.getLogger(__name__)


def make_test_settings(**overrides) -> Settings:
    """
    Settings for tests: console-only text logging, no startup DDL.

    Built explicitly (no .env lookup) so a developer's local file cannot
    change the behaviour of the suite.
    """
    values = {
        "ENV": "testing",
        "TESTING": True,
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "text",
        "LOG_TO_STDOUT": True,
        "CREATE_TABLES_ON_STARTUP": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return make_test_settings()


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """
    Install the application's dictConfig once for the whole session, so the
    request-id and redact filters are active in every test.
    """
    setup_logging(test_settings)
    yield
    stop_queue_logging()


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------


def safe_log_db_url(db_url: str) -> str:
    """
    Strip credentials from a database URL before it is logged.
    """
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    """
    1. `TEST_DATABASE_URL` from the environment (CI against a real Postgres)
    2. otherwise an in-memory SQLite database through aiosqlite
    """
    return os.getenv("TEST_DATABASE_URL") or "sqlite+aiosqlite://"


TEST_DATABASE_URL = get_test_database_url()
logger.info(f"Using test DB: {safe_log_db_url(TEST_DATABASE_URL)}")


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh schema per test. For in-memory SQLite every connection must share
    one underlying DBAPI connection, otherwise each one sees an empty database.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Session used by repository and service tests. Services commit for real;
    isolation comes from the per-test schema of `async_engine`.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


# Domain fixtures, registered globally
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    base_repo,
    intern_repository,
    intern_service,
    sample_intern_data,
    create_intern,
    created_intern,
    multiple_interns,
)
from .test_fixtures.api_fixtures import (  # noqa: E402,F401
    app,
    client,
)
