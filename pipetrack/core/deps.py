from __future__ import annotations

import logging
from typing import Callable
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.logging import user_var
from pipetrack.core.security import ACCESS_TOKEN_TYPE, decode_token
from pipetrack.db.models.security import User
from pipetrack.db.session import get_async_session
from pipetrack.repositories.security import UserRepository

logger = logging.getLogger(__name__)

# Login takes a JSON body; tokenUrl only feeds the OpenAPI security scheme.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def _unauthorized(detail: str = "Invalid token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# PUBLIC_INTERFACE
async def get_session(session: AsyncSession = Depends(get_async_session)) -> AsyncSession:
    """
    Request-scoped AsyncSession. FastAPI drives the get_async_session
    generator and closes the session after the response.
    """
    return session


def _user_id_from_token(token: str) -> UUID:
    try:
        claims = decode_token(token)
    except JWTError:
        raise _unauthorized()
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized()
    try:
        return UUID(str(claims.get("sub")))
    except ValueError:
        raise _unauthorized()


# PUBLIC_INTERFACE
async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session),
) -> User:
    """
    Load the user named by the bearer token.

    The row is read on every request, so a role change or deactivation
    applies to tokens already issued.
    """
    user = await UserRepository(session).get_user_by_id(_user_id_from_token(token))
    if user is None:
        raise _unauthorized("User not found")
    user_var.set(user.username)
    return user


# PUBLIC_INTERFACE
async def get_current_active_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return user


# PUBLIC_INTERFACE
def require_roles(*roles: str) -> Callable:
    """Dependency factory: the caller must hold one of `roles`; admin always passes."""
    allowed = frozenset(roles) | {"admin"}

    async def check(user: User = Depends(get_current_active_user)) -> User:
        if user.role not in allowed:
            logger.info("%s (%s) denied; needs one of %s", user.username, user.role, ", ".join(sorted(allowed)))
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return user

    return check
