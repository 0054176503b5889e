from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from pipetrack.db.base import Base, UUIDPkMixin, TimestampMixin


class ProductionPlan(UUIDPkMixin, TimestampMixin, Base):
    """Dispatched work assignment. Independent of the ledger."""
    __tablename__ = "production_plans"

    order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    sub_order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("sub_orders.id"), nullable=False)
    workshop: Mapped[str] = mapped_column(Text, nullable=False)
    team: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shift: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    planned_date: Mapped[date] = mapped_column(Date, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    process: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending", server_default="pending", index=True)
