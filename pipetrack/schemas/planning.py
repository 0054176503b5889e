from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PlanCreate(BaseModel):
    """Dispatch a production plan to a workshop."""
    order_id: UUID = Field(..., description="Order the plan belongs to")
    sub_order_id: UUID = Field(..., description="Sub-order to produce")
    workshop: str = Field(..., min_length=1, description="Workshop the work is assigned to")
    team: Optional[str] = Field(None)
    shift: Optional[str] = Field(None)
    planned_date: date = Field(..., description="Day the work is planned for")
    quantity: int = Field(..., gt=0, description="Pipes to produce")
    process: Optional[str] = Field(None, description="Production stage; defaults to packaging")


class PlanUpdate(BaseModel):
    """Updatable plan fields. Anything else is rejected."""
    status: Optional[Literal["pending", "completed"]] = Field(None)
    quantity: Optional[int] = Field(None, gt=0)
    team: Optional[str] = Field(None)
    shift: Optional[str] = Field(None)
    planned_date: Optional[date] = Field(None)

    class Config:
        extra = "forbid"


class PlanRead(BaseModel):
    """Production plan read model."""
    id: UUID = Field(..., description="Plan ID")
    order_id: UUID = Field(..., description="Order ID")
    sub_order_id: UUID = Field(..., description="Sub-order ID")
    workshop: str = Field(...)
    team: Optional[str] = Field(None)
    shift: Optional[str] = Field(None)
    planned_date: date = Field(...)
    quantity: int = Field(...)
    process: str = Field(...)
    status: str = Field(..., description="pending | completed")
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")

    class Config:
        from_attributes = True
