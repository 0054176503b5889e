from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, select, update

from pipetrack.db.models.security import User
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Login accounts. Writes are committed by UserService."""

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self.scalar_one_or_none(select(User).where(User.username == username))

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id).execution_options(populate_existing=True)
        return await self.scalar_one_or_none(stmt)

    async def list_users(self, limit: Optional[int] = None, offset: int = 0) -> List[User]:
        return await self.fetch_page(select(User).order_by(User.created_at.desc(), User.username), limit, offset)

    async def update_fields(self, user_id: UUID, values: Dict[str, Any]) -> None:
        await self.execute(update(User).where(User.id == user_id).values(**values))

    async def delete_user(self, user_id: UUID) -> bool:
        result = await self.execute(delete(User).where(User.id == user_id))
        return bool(result.rowcount)
