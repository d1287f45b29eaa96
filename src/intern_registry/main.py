# src/intern_registry/main.py
"""
Application factory.

    uvicorn intern_registry.main:create_app --factory

Everything the request path needs (settings, engine, session factory) is
built here once and stored on `app.state`; nothing is created at import time.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from intern_registry.api.error_handlers import register_exception_handlers
from intern_registry.api.interns import router as interns_router
from intern_registry.config.settings import Settings, get_settings
from intern_registry.core.logging import RequestIDMiddleware, setup_logging, stop_queue_logging
from intern_registry.database.session import build_engine, build_session_factory, create_tables
from intern_registry.utils.logging import get_project_name, get_project_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = app.state.engine

    if engine is not None and settings.CREATE_TABLES_ON_STARTUP:
        await create_tables(engine)
    logger.info("app.startup", extra={"env": settings.ENV, "version": get_project_version()})

    try:
        yield
    finally:
        logger.info("app.shutdown")
        if engine is not None:
            await engine.dispose()
        stop_queue_logging()


def create_app(settings: Settings | None = None, session_factory=None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: defaults to `get_settings()`
        session_factory: an existing `async_sessionmaker`; when given, no
            engine is created and the caller owns the store (tests do this)
    """
    settings = settings or get_settings()
    setup_logging(settings)

    engine = None
    if session_factory is None:
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)

    app = FastAPI(title=get_project_name(), version=get_project_version(), lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)
    app.include_router(interns_router)

    return app
