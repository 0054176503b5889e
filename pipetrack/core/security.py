"""Password hashing (bcrypt via passlib) and JWT access tokens (python-jose)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from pipetrack.core.settings import get_app_settings

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return _pwd_context.verify(plain_password, hashed_password)


# PUBLIC_INTERFACE
def create_access_token(
    subject: str,
    username: str,
    role: str,
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Sign an access token.

    Claims: sub (user id), username, role, iat, exp and type="access". The
    role claim is informational; authorization always re-reads the user row.
    """
    settings = get_app_settings()
    issued = datetime.now(tz=timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims: Dict[str, Any] = {
        "sub": subject,
        "username": username,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued,
        "exp": issued + lifetime,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# PUBLIC_INTERFACE
def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; raises jose.JWTError otherwise."""
    settings = get_app_settings()
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
