"""
FastAPI dependencies.

The session factory is created once by `create_app` and stored on
`app.state`; each request gets its own AsyncSession and its own
InternService built on top of it.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from intern_registry.repositories.intern_repository import InternRepository
from intern_registry.services.intern_service import InternService


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for this request and close it afterwards."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


def get_intern_service(session: AsyncSession = Depends(get_async_session)) -> InternService:
    return InternService(InternRepository(session))
