from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProgressRow(BaseModel):
    """One sub-order line of the progress report."""
    order_id: UUID
    order_no: str
    customer_name: Optional[str] = None
    delivery_date: Optional[date] = None
    workshop: Optional[str] = None
    sub_order_id: UUID
    line_no: int
    spec: str
    level: str
    interface_type: str
    lining: str
    length: str
    coating: str
    planned_quantity: int
    produced_quantity: int
    shipped_quantity: int
    available_stock: int
    production_percent: int
    shipping_percent: int
    total_weight: Optional[Decimal] = None
    status: str


class ProgressTotals(BaseModel):
    """Sums over all report rows."""
    lines: int = Field(0, description="Number of sub-order lines")
    planned_quantity: int = Field(0)
    produced_quantity: int = Field(0)
    shipped_quantity: int = Field(0)
    total_weight: Decimal = Field(Decimal("0"), description="Planned tonnage")
    production_percent: int = Field(0)
    shipping_percent: int = Field(0)


class ProgressReport(BaseModel):
    """Per-line progress rows plus totals."""
    rows: List[ProgressRow] = Field(default_factory=list)
    totals: ProgressTotals = Field(default_factory=ProgressTotals)


class DashboardStats(BaseModel):
    """Home page counters."""
    today: date = Field(..., description="Day the daily figures refer to")
    today_packaged: int = Field(0, description="Pipes packaged today")
    today_shipped: int = Field(0, description="Pipes shipped today")
    total_orders: int = Field(0, description="Non-deleted orders")
    orders_by_status: Dict[str, int] = Field(default_factory=dict)
    pending_plans: int = Field(0)
