from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_current_active_user, get_session, require_roles
from pipetrack.schemas.common import CreatedResponse
from pipetrack.schemas.ledger import ProductionRecordCreate, ProductionRecordRead
from pipetrack.services.ledger import LedgerService

router = APIRouter(prefix="/production", tags=["Production"])


# PUBLIC_INTERFACE
@router.post(
    "/records",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report production",
    description=(
        "Append a production record. Packaging (the default process) advances the line's "
        "produced quantity and status; pulling, hydrostatic, lining and coating advance "
        "their own counters only."
    ),
    dependencies=[Depends(require_roles("production", "operator"))],
)
async def create_production_record(
    payload: ProductionRecordCreate,
    session: AsyncSession = Depends(get_session),
) -> CreatedResponse:
    record_id = await LedgerService(session).append_production(
        payload.sub_order_id, payload.quantity, payload.process, payload
    )
    return CreatedResponse(id=record_id, message="Production recorded")


# PUBLIC_INTERFACE
@router.get(
    "/records",
    response_model=List[ProductionRecordRead],
    summary="List production records",
    description="Production records, newest first.",
    dependencies=[Depends(get_current_active_user)],
)
async def list_production_records(
    session: AsyncSession = Depends(get_session),
    order_id: Optional[UUID] = Query(None, description="Filter by order id"),
    sub_order_id: Optional[UUID] = Query(None, description="Filter by sub-order id"),
    process: Optional[str] = Query(None, description="Filter by process"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> List[ProductionRecordRead]:
    return await LedgerService(session).list_production_records(
        order_id=order_id, sub_order_id=sub_order_id, process=process, limit=limit, offset=offset
    )
