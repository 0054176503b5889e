from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_current_active_user, get_session, require_roles
from pipetrack.schemas.common import CreatedResponse
from pipetrack.schemas.ledger import ShippingRecordCreate, ShippingRecordRead
from pipetrack.services.ledger import LedgerService

router = APIRouter(prefix="/shipping", tags=["Shipping"])


# PUBLIC_INTERFACE
@router.post(
    "/records",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report shipment",
    description="Append a shipping record. Shipments are not capped by produced stock.",
    dependencies=[Depends(require_roles("production", "operator"))],
)
async def create_shipping_record(
    payload: ShippingRecordCreate,
    session: AsyncSession = Depends(get_session),
) -> CreatedResponse:
    record_id = await LedgerService(session).append_shipping(payload.sub_order_id, payload.quantity, payload)
    return CreatedResponse(id=record_id, message="Shipment recorded")


# PUBLIC_INTERFACE
@router.get(
    "/records",
    response_model=List[ShippingRecordRead],
    summary="List shipping records",
    description="Shipping records, newest first.",
    dependencies=[Depends(get_current_active_user)],
)
async def list_shipping_records(
    session: AsyncSession = Depends(get_session),
    order_id: Optional[UUID] = Query(None, description="Filter by order id"),
    sub_order_id: Optional[UUID] = Query(None, description="Filter by sub-order id"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> List[ShippingRecordRead]:
    return await LedgerService(session).list_shipping_records(
        order_id=order_id, sub_order_id=sub_order_id, limit=limit, offset=offset
    )
