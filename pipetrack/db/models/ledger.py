from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from pipetrack.db.base import Base, UUIDPkMixin, utcnow


class ProductionRecord(UUIDPkMixin, Base):
    """Append-only production event for one sub-order and one process stage."""
    __tablename__ = "production_records"

    order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    sub_order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("sub_orders.id"), nullable=False, index=True)
    team: Mapped[str] = mapped_column(Text, nullable=False)
    shift: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    workshop: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    warehouse: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    operator_id: Mapped[str] = mapped_column(Text, nullable=False)
    heat_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    process: Mapped[str] = mapped_column(Text, nullable=False, default="packaging", server_default="packaging")
    # Quality parameters captured at the station
    pressure: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    pressure_time: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    zinc_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    lining_thickness: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class ShippingRecord(UUIDPkMixin, Base):
    """Append-only shipping event for one sub-order."""
    __tablename__ = "shipping_records"

    order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    sub_order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("sub_orders.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    transport_type: Mapped[str] = mapped_column(Text, nullable=False)
    shipping_type: Mapped[str] = mapped_column(Text, nullable=False)
    shipping_warehouse: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    vehicle_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shipping_no: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    destination: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    operator_id: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
