"""
Process-wide async engine and the per-request session dependency.

The engine is created on first use so importing the package (tests, the
OpenAPI generator) never opens a connection.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import get_db_settings

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_sessions: Optional[async_sessionmaker[AsyncSession]] = None


# PUBLIC_INTERFACE
def get_engine() -> AsyncEngine:
    """Return the shared AsyncEngine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = get_db_settings()
        _engine = create_async_engine(settings.async_database_url, **settings.engine_options())
        logger.info("Database engine created for %s backend", settings.backend)
    return _engine


# PUBLIC_INTERFACE
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the shared engine."""
    global _sessions
    if _sessions is None:
        # Services read attributes after commit; keep them loaded.
        _sessions = async_sessionmaker(bind=get_engine(), expire_on_commit=False, autoflush=False)
    return _sessions


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one AsyncSession per request."""
    async with get_session_maker()() as session:
        yield session


# PUBLIC_INTERFACE
async def dispose_engine() -> None:
    """Close pooled connections; the next get_engine() call starts afresh."""
    global _engine, _sessions
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessions = None
