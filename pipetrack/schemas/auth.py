from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

Role = Literal["admin", "order_entry", "production", "operator"]


class LoginRequest(BaseModel):
    """Username and password credentials."""
    username: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="Password")


class TokenResponse(BaseModel):
    """Bearer access token."""
    token_type: str = Field("bearer", description="Token type, typically 'bearer'")
    access_token: str = Field(..., description="JWT access token")


class UserRead(BaseModel):
    """User read model."""
    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Login name")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="admin | order_entry | production | operator")
    avatar: Optional[str] = Field(None)
    is_active: bool = Field(..., description="Active flag")
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    """Admin create user payload."""
    username: str = Field(..., min_length=1, description="Login name (unique)")
    password: str = Field(..., min_length=6, description="Password")
    name: str = Field(..., min_length=1, description="Display name")
    role: Role = Field(..., description="User role")
    avatar: Optional[str] = Field(None)
    is_active: Optional[bool] = Field(default=True)


class UserUpdate(BaseModel):
    """Admin update user payload."""
    password: Optional[str] = Field(None, min_length=6)
    name: Optional[str] = Field(None)
    role: Optional[Role] = Field(None)
    avatar: Optional[str] = Field(None)
    is_active: Optional[bool] = Field(None)
