"""
Database seeding utilities for minimal reference data.

Seeds:
- Default users, one per role (admin, entry, prod, operator)
- Default master data option lists (specs, levels, linings, ...)

Existing rows are left untouched, so seeding can run on every start.

Usage:
  python -m pipetrack.db.run_migrations upgrade head
  python -m pipetrack.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.security import get_password_hash
from pipetrack.db.models.security import User
from pipetrack.db.session import get_async_session
from pipetrack.repositories.security import UserRepository
from pipetrack.services.master_data import DEFAULT_MASTER_DATA, MasterDataRegistry

logger = logging.getLogger(__name__)

# username, display name, role, password
DEFAULT_USERS: List[Tuple[str, str, str, str]] = [
    ("admin", "系统管理员", "admin", "admin123"),
    ("entry", "订单录入员", "order_entry", "123456"),
    ("prod", "生产主管", "production", "123456"),
    ("operator", "车间操作员", "operator", "123456"),
]


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """
    Seed the database with minimal reference data.

    This function:
      - Creates the default users that do not exist yet
      - Appends any missing default master data values
    """
    # Create a standalone session via dependency to reuse engine configuration.
    async for session in get_async_session():
        await _seed_users(session)
        await _seed_master_data(session)


async def _seed_users(session: AsyncSession) -> None:
    repo = UserRepository(session)
    for username, name, role, password in DEFAULT_USERS:
        if await repo.get_user_by_username(username):
            continue
        await repo.add(
            User(username=username, name=name, role=role, hashed_password=get_password_hash(password))
        )
        logger.info("Seeded user %s (%s)", username, role)
    await repo.commit()


async def _seed_master_data(session: AsyncSession) -> None:
    registry = MasterDataRegistry(session)
    async with registry.unit_of_work():
        for category, values in DEFAULT_MASTER_DATA.items():
            added = await registry.add_many(category, values)
            if added:
                logger.info("Seeded %d %s value(s)", added, category)


# PUBLIC_INTERFACE
def main() -> None:
    """Entrypoint to run the asynchronous seeding."""
    asyncio.run(seed_all())


if __name__ == "__main__":
    main()
