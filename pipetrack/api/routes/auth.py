from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_current_active_user, get_session
from pipetrack.core.security import create_access_token
from pipetrack.services.users import UserService
from pipetrack.schemas.auth import LoginRequest, TokenResponse, UserRead

router = APIRouter(prefix="/auth", tags=["Auth"])


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Authenticate with username and password and receive a bearer access token.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Authenticate user and issue an access token."""
    user = await UserService(session).authenticate(payload.username, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")

    access = create_access_token(subject=str(user.id), username=user.username, role=user.role)
    return TokenResponse(access_token=access)


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=UserRead,
    summary="Read current user",
    description="Return the current authenticated user.",
)
async def read_current_user(user=Depends(get_current_active_user)) -> UserRead:
    """Return current user profile."""
    return UserRead.model_validate(user)
