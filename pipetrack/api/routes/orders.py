from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_current_active_user, get_session, require_roles
from pipetrack.schemas.common import CreatedResponse, MessageResponse
from pipetrack.schemas.orders import OrderCreate, OrderRead, OrderUpdate
from pipetrack.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[OrderRead],
    summary="List orders",
    description="Non-deleted orders, newest first, with nested lines, counters and statuses.",
    dependencies=[Depends(get_current_active_user)],
)
async def list_orders(
    session: AsyncSession = Depends(get_session),
    status_: Optional[str] = Query(None, alias="status", description="Filter by order status"),
    search: Optional[str] = Query(None, description="Substring of order number or customer name"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> List[OrderRead]:
    return await OrderService(session).list_orders(status=status_, search=search, limit=limit, offset=offset)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Create an order header with its lines. Order numbers are unique.",
)
async def create_order(
    payload: OrderCreate,
    session: AsyncSession = Depends(get_session),
    user=Depends(require_roles("order_entry")),
) -> CreatedResponse:
    order_id = await OrderService(session).create_order(payload, created_by=user.username)
    return CreatedResponse(id=order_id, message="Order created")


# PUBLIC_INTERFACE
@router.get(
    "/by-number/{order_no}",
    response_model=OrderRead,
    summary="Find order by number",
    description="Look up a non-deleted order by its order number.",
    dependencies=[Depends(get_current_active_user)],
)
async def get_order_by_number(
    order_no: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    return await OrderService(session).get_by_order_no(order_no)


# PUBLIC_INTERFACE
@router.get(
    "/{order_id}",
    response_model=OrderRead,
    summary="Get order",
    description="Get a non-deleted order by id.",
    dependencies=[Depends(get_current_active_user)],
)
async def get_order(
    order_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    return await OrderService(session).get_order(order_id)


# PUBLIC_INTERFACE
@router.patch(
    "/{order_id}",
    response_model=OrderRead,
    summary="Update order header",
    description="Update customer_name, delivery_date, workshop, warehouse or remarks. Other fields are rejected.",
    dependencies=[Depends(require_roles("order_entry"))],
)
async def update_order(
    payload: OrderUpdate,
    order_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    return await OrderService(session).update_order(order_id, payload)


# PUBLIC_INTERFACE
@router.delete(
    "/{order_id}",
    response_model=MessageResponse,
    summary="Delete order",
    description="Soft delete: the order disappears from listings; lines and ledger records are kept.",
    dependencies=[Depends(require_roles("order_entry"))],
)
async def delete_order(
    order_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    await OrderService(session).delete_order(order_id)
    return MessageResponse(message="Order deleted")


# PUBLIC_INTERFACE
@router.post(
    "/{order_id}/recompute",
    response_model=OrderRead,
    summary="Recompute order from ledger",
    description="Rebuild every line's counters and status from the production and shipping records.",
    dependencies=[Depends(require_roles("order_entry", "production"))],
)
async def recompute_order(
    order_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    return await OrderService(session).recompute_order(order_id)
