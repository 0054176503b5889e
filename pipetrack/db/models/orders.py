from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pipetrack.db.base import Base, UUIDPkMixin, TimestampMixin


class Order(UUIDPkMixin, TimestampMixin, Base):
    """Customer order header. Soft-deleted rows keep deleted_at set."""
    __tablename__ = "orders"

    order_no: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    customer_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    delivery_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    workshop: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    warehouse: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="new", server_default="new")
    created_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    items: Mapped[List["SubOrder"]] = relationship(
        "SubOrder",
        back_populates="order",
        order_by="SubOrder.line_no",
        lazy="selectin",
    )


class SubOrder(UUIDPkMixin, TimestampMixin, Base):
    """
    Order line: one pipe configuration and its planned quantity, plus the
    counters accumulated from the production/shipping ledger.
    """
    __tablename__ = "sub_orders"

    order_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    line_no: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    spec: Mapped[str] = mapped_column(Text, nullable=False)
    level: Mapped[str] = mapped_column(Text, nullable=False)
    interface_type: Mapped[str] = mapped_column(Text, nullable=False)
    lining: Mapped[str] = mapped_column(Text, nullable=False)
    length: Mapped[str] = mapped_column(Text, nullable=False)
    coating: Mapped[str] = mapped_column(Text, nullable=False)
    planned_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    total_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 3), nullable=True)
    batch_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    produced_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    pulling_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    hydrostatic_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    lining_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    coating_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    shipped_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    status: Mapped[str] = mapped_column(Text, nullable=False, default="new", server_default="new")

    order: Mapped["Order"] = relationship("Order", back_populates="items")
