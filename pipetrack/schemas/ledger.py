from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProductionMeta(BaseModel):
    """Descriptive fields of a production record (everything but target, quantity and process)."""
    order_id: Optional[UUID] = Field(None, description="Owning order; must match the sub-order when given")
    team: str = Field(..., min_length=1, description="Crew, e.g. 甲班")
    shift: str = Field(..., min_length=1, description="Shift, e.g. 白班")
    workshop: Optional[str] = Field(None)
    warehouse: Optional[str] = Field(None)
    operator_id: str = Field(..., min_length=1, description="Username of the operator")
    heat_no: Optional[str] = Field(None, description="Furnace heat number")
    pressure: Optional[Decimal] = Field(None, description="Hydrostatic test pressure (MPa)")
    pressure_time: Optional[Decimal] = Field(None, description="Hydrostatic hold time (s)")
    zinc_weight: Optional[Decimal] = Field(None, description="Zinc coating weight (g/m2)")
    lining_thickness: Optional[Decimal] = Field(None, description="Lining thickness (mm)")
    timestamp: Optional[datetime] = Field(None, description="Event time; defaults to now")


class ProductionRecordCreate(ProductionMeta):
    """Append a production record."""
    sub_order_id: UUID = Field(..., description="Target sub-order")
    quantity: int = Field(..., description="Completed pipes (positive)")
    process: Optional[str] = Field(None, description="pulling | hydrostatic | lining | coating | packaging (default)")


class ProductionRecordRead(BaseModel):
    """Production record read model."""
    class Config:
        from_attributes = True

    id: UUID
    order_id: UUID
    sub_order_id: UUID
    team: str
    shift: str
    quantity: int
    workshop: Optional[str] = None
    warehouse: Optional[str] = None
    operator_id: str
    heat_no: Optional[str] = None
    process: str
    pressure: Optional[Decimal] = None
    pressure_time: Optional[Decimal] = None
    zinc_weight: Optional[Decimal] = None
    lining_thickness: Optional[Decimal] = None
    timestamp: datetime


class ShippingMeta(BaseModel):
    """Descriptive fields of a shipping record."""
    order_id: Optional[UUID] = Field(None, description="Owning order; must match the sub-order when given")
    transport_type: str = Field(..., min_length=1, description="Truck, rail, ...")
    shipping_type: str = Field(..., min_length=1, description="Delivery or customer pickup")
    shipping_warehouse: Optional[str] = Field(None)
    vehicle_info: Optional[str] = Field(None)
    shipping_no: Optional[str] = Field(None)
    destination: Optional[str] = Field(None)
    operator_id: str = Field(..., min_length=1)
    timestamp: Optional[datetime] = Field(None, description="Event time; defaults to now")


class ShippingRecordCreate(ShippingMeta):
    """Append a shipping record."""
    sub_order_id: UUID = Field(..., description="Target sub-order")
    quantity: int = Field(..., description="Shipped pipes (positive)")


class ShippingRecordRead(BaseModel):
    """Shipping record read model."""
    class Config:
        from_attributes = True

    id: UUID
    order_id: UUID
    sub_order_id: UUID
    quantity: int
    transport_type: str
    shipping_type: str
    shipping_warehouse: Optional[str] = None
    vehicle_info: Optional[str] = None
    shipping_no: Optional[str] = None
    destination: Optional[str] = None
    operator_id: str
    timestamp: datetime
