from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_session, require_roles
from pipetrack.schemas.common import CreatedResponse
from pipetrack.schemas.planning import PlanCreate, PlanRead, PlanUpdate
from pipetrack.services.planning import PlanService

router = APIRouter(prefix="/plans", tags=["Plans"])


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Dispatch plan",
    description="Assign a quantity of a sub-order to a workshop for a given day.",
    dependencies=[Depends(require_roles("production"))],
)
async def create_plan(
    payload: PlanCreate,
    session: AsyncSession = Depends(get_session),
) -> CreatedResponse:
    plan_id = await PlanService(session).create_plan(payload)
    return CreatedResponse(id=plan_id, message="Plan dispatched")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[PlanRead],
    summary="List plans",
    description="Pending plans, newest first.",
    dependencies=[Depends(require_roles("production", "operator"))],
)
async def list_plans(
    session: AsyncSession = Depends(get_session),
    order_id: Optional[UUID] = Query(None, description="Filter by order id"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> List[PlanRead]:
    return await PlanService(session).list_plans(order_id=order_id, limit=limit, offset=offset)


# PUBLIC_INTERFACE
@router.patch(
    "/{plan_id}",
    response_model=PlanRead,
    summary="Update plan",
    description="Update status, quantity, team, shift or planned_date. Other fields are rejected.",
    dependencies=[Depends(require_roles("production"))],
)
async def update_plan(
    payload: PlanUpdate,
    plan_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
) -> PlanRead:
    return await PlanService(session).update_plan(plan_id, payload)
