from __future__ import annotations

from typing import Optional
from sqlalchemy import Boolean, Text, true
from sqlalchemy.orm import Mapped, mapped_column

from pipetrack.db.base import Base, UUIDPkMixin, TimestampMixin


class User(UUIDPkMixin, TimestampMixin, Base):
    """Application user. Role is one of admin/order_entry/production/operator."""
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hashed_password: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
