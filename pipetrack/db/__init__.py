"""
Database layer: declarative base, settings, engine/session helpers and the
ORM models (imported here so every table is registered on Base.metadata).
"""

from .base import Base
from .config import DatabaseSettings, get_db_settings
from .session import (
    dispose_engine,
    get_async_session,
    get_engine,
    get_session_maker,
)
from . import models as models  # noqa: F401

__all__ = [
    "Base",
    "DatabaseSettings",
    "get_db_settings",
    "get_engine",
    "get_session_maker",
    "get_async_session",
    "dispose_engine",
    "models",
]
