from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_session, require_roles
from pipetrack.schemas.auth import UserCreate, UserRead, UserUpdate
from pipetrack.schemas.common import MessageResponse
from pipetrack.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])

admin_only = require_roles("admin")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[UserRead],
    summary="List users",
    dependencies=[Depends(admin_only)],
)
async def list_users(
    session: AsyncSession = Depends(get_session),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> List[UserRead]:
    users = await UserService(session).list_users(limit=limit, offset=offset)
    return [UserRead.model_validate(u) for u in users]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Role is one of admin, order_entry, production, operator. Duplicate usernames are rejected (400).",
    dependencies=[Depends(admin_only)],
)
async def create_user(payload: UserCreate, session: AsyncSession = Depends(get_session)) -> UserRead:
    return UserRead.model_validate(await UserService(session).create_user(payload))


# PUBLIC_INTERFACE
@router.patch(
    "/{user_id}",
    response_model=UserRead,
    summary="Update user",
    dependencies=[Depends(admin_only)],
)
async def update_user(
    payload: UserUpdate,
    user_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    return UserRead.model_validate(await UserService(session).update_user(user_id, payload))


# PUBLIC_INTERFACE
@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete user")
async def delete_user(
    user_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
    current=Depends(admin_only),
) -> MessageResponse:
    await UserService(session).delete_user(user_id, acting_user_id=current.id)
    return MessageResponse(message="User deleted")
