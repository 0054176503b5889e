from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from pipetrack.services.progress import (
    available_stock,
    is_in_production,
    is_production_done,
    progress_percent,
    remaining_to_ship,
)


class SubOrderCreate(BaseModel):
    """One order line: pipe configuration plus planned quantity."""
    spec: str = Field(..., min_length=1, description="Nominal diameter, e.g. DN100")
    level: str = Field(..., min_length=1, description="Pressure class, e.g. K9")
    interface_type: str = Field(..., min_length=1, description="Joint type")
    lining: str = Field(..., min_length=1, description="Internal lining")
    length: str = Field(..., min_length=1, description="Pipe length")
    coating: str = Field(..., min_length=1, description="External corrosion protection")
    planned_quantity: int = Field(..., gt=0, description="Planned number of pipes")
    unit_weight: Optional[Decimal] = Field(None, ge=0, description="Weight per pipe (t); looked up from standards when omitted")
    total_weight: Optional[Decimal] = Field(None, ge=0, description="Line weight (t); unit_weight x planned_quantity when omitted")
    batch_no: Optional[str] = Field(None)


class OrderCreate(BaseModel):
    """Create order payload: header plus ordered lines."""
    order_no: str = Field(..., min_length=1, description="Order number (unique)")
    customer_name: Optional[str] = Field(None)
    delivery_date: Optional[date] = Field(None)
    workshop: Optional[str] = Field(None, description="Production line, e.g. 一车间")
    warehouse: Optional[str] = Field(None)
    remarks: Optional[str] = Field(None)
    created_by: Optional[str] = Field(None, description="Username; defaults to the caller")
    items: List[SubOrderCreate] = Field(default_factory=list)


class OrderUpdate(BaseModel):
    """Updatable order header fields. Anything else is rejected."""
    class Config:
        extra = "forbid"

    customer_name: Optional[str] = Field(None)
    delivery_date: Optional[date] = Field(None)
    workshop: Optional[str] = Field(None)
    warehouse: Optional[str] = Field(None)
    remarks: Optional[str] = Field(None)


class SubOrderRead(BaseModel):
    """Sub-order read model with counters, status and derived progress."""
    class Config:
        from_attributes = True

    id: UUID
    order_id: UUID
    line_no: int
    spec: str
    level: str
    interface_type: str
    lining: str
    length: str
    coating: str
    planned_quantity: int
    unit_weight: Optional[Decimal] = None
    total_weight: Optional[Decimal] = None
    batch_no: Optional[str] = None
    produced_quantity: int = 0
    pulling_quantity: int = 0
    hydrostatic_quantity: int = 0
    lining_quantity: int = 0
    coating_quantity: int = 0
    shipped_quantity: int = 0
    status: str

    @computed_field  # type: ignore[misc]
    @property
    def production_percent(self) -> int:
        return progress_percent(self.produced_quantity, self.planned_quantity)

    @computed_field  # type: ignore[misc]
    @property
    def shipping_percent(self) -> int:
        return progress_percent(self.shipped_quantity, self.planned_quantity)

    @computed_field  # type: ignore[misc]
    @property
    def available_stock(self) -> int:
        return available_stock(self.produced_quantity, self.shipped_quantity)

    @computed_field  # type: ignore[misc]
    @property
    def remaining_to_ship(self) -> int:
        return remaining_to_ship(self.planned_quantity, self.shipped_quantity)


class OrderRead(BaseModel):
    """Order read model with nested lines."""
    class Config:
        from_attributes = True

    id: UUID
    order_no: str
    customer_name: Optional[str] = None
    delivery_date: Optional[date] = None
    workshop: Optional[str] = None
    warehouse: Optional[str] = None
    remarks: Optional[str] = None
    status: str
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: List[SubOrderRead] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def in_production(self) -> bool:
        return is_in_production(i.status for i in self.items)

    @computed_field  # type: ignore[misc]
    @property
    def production_done(self) -> bool:
        return is_production_done(i.status for i in self.items)

    @computed_field  # type: ignore[misc]
    @property
    def total_planned(self) -> int:
        return sum(i.planned_quantity for i in self.items)

    @computed_field  # type: ignore[misc]
    @property
    def total_produced(self) -> int:
        return sum(i.produced_quantity for i in self.items)

    @computed_field  # type: ignore[misc]
    @property
    def total_shipped(self) -> int:
        return sum(i.shipped_quantity for i in self.items)

    @computed_field  # type: ignore[misc]
    @property
    def production_percent(self) -> int:
        return progress_percent(self.total_produced, self.total_planned)
