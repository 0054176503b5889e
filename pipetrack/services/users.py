from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.errors import NotFoundError, ValidationError
from pipetrack.core.security import get_password_hash, verify_password
from pipetrack.db.models.security import User
from pipetrack.repositories.security import UserRepository
from pipetrack.schemas.auth import UserCreate, UserUpdate
from pipetrack.services.base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Account administration and credential checks."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)

    # PUBLIC_INTERFACE
    async def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user when the password matches, else None. Active flag is checked by the caller."""
        user = await self.repo.get_user_by_username(username)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Failed login for %s", username)
            return None
        return user

    async def list_users(self, *, limit: Optional[int] = None, offset: int = 0) -> List[User]:
        return await self.repo.list_users(limit=limit, offset=offset)

    # PUBLIC_INTERFACE
    async def create_user(self, payload: UserCreate) -> User:
        """
        Raises:
            ValidationError: the username is taken.
        """
        async with self.unit_of_work():
            if await self.repo.get_user_by_username(payload.username):
                raise ValidationError(
                    f"User '{payload.username}' already exists", details={"username": payload.username}
                )
            user = await self.repo.insert(
                User(
                    username=payload.username,
                    name=payload.name,
                    role=payload.role,
                    avatar=payload.avatar,
                    hashed_password=get_password_hash(payload.password),
                    is_active=True if payload.is_active is None else payload.is_active,
                )
            )
        logger.info("Created user %s (%s)", user.username, user.role)
        return user

    # PUBLIC_INTERFACE
    async def update_user(self, user_id: UUID, payload: UserUpdate) -> User:
        """Apply the provided fields; a new password is hashed before storage."""
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        password = values.pop("password", None)
        if password:
            values["hashed_password"] = get_password_hash(password)

        async with self.unit_of_work():
            if await self.repo.get_user_by_id(user_id) is None:
                raise NotFoundError("User not found", details={"user_id": str(user_id)})
            if values:
                await self.repo.update_fields(user_id, values)
        return await self.repo.get_user_by_id(user_id)

    # PUBLIC_INTERFACE
    async def delete_user(self, user_id: UUID, *, acting_user_id: UUID) -> None:
        """
        Raises:
            ValidationError: an admin tried to delete their own account.
            NotFoundError: no such user.
        """
        if user_id == acting_user_id:
            raise ValidationError("Cannot delete the current user")
        async with self.unit_of_work():
            if not await self.repo.delete_user(user_id):
                raise NotFoundError("User not found", details={"user_id": str(user_id)})
        logger.info("Deleted user %s", user_id)
