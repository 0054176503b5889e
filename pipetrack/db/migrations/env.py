"""
Alembic environment for the order tracking schema.

Online mode runs on an async engine (asyncpg or aiosqlite); SQLite gets batch
mode so ALTERs are emulated by table copies.
"""

from __future__ import annotations

import asyncio

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

import pipetrack.db.models  # noqa: F401  (registers every table)
from pipetrack.db.base import Base
from pipetrack.db.config import get_db_settings

db_settings = get_db_settings()
target_metadata = Base.metadata

_COMMON = dict(
    target_metadata=target_metadata,
    compare_type=True,
    render_as_batch=db_settings.is_sqlite,
)


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it."""
    context.configure(
        url=context.config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_COMMON,
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, **_COMMON)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(db_settings.async_database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
