from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_current_active_user, get_session, require_roles
from pipetrack.schemas.master_data import MasterDataCategory, MasterDataRead, MasterDataValueCreate
from pipetrack.services.master_data import MasterDataRegistry

router = APIRouter(prefix="/master-data", tags=["Master Data"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=MasterDataRead,
    summary="List master data",
    description="All option categories with their values in first-insertion order.",
    dependencies=[Depends(get_current_active_user)],
)
async def list_master_data(session: AsyncSession = Depends(get_session)) -> MasterDataRead:
    return MasterDataRead.from_mapping(await MasterDataRegistry(session).list_all())


# PUBLIC_INTERFACE
@router.get(
    "/{category}",
    response_model=MasterDataCategory,
    summary="List one category",
    description="Values of one category (specs, levels, interfaces, linings, lengths, coatings, warehouses, workshops).",
    dependencies=[Depends(get_current_active_user)],
)
async def list_category(
    category: str = Path(...),
    session: AsyncSession = Depends(get_session),
) -> MasterDataCategory:
    values = await MasterDataRegistry(session).list_category(category)
    return MasterDataCategory(category=category, values=values)


# PUBLIC_INTERFACE
@router.post(
    "/{category}",
    response_model=MasterDataCategory,
    summary="Register value",
    description="Append a value to a category unless it is already present (exact match).",
    dependencies=[Depends(require_roles("order_entry", "production"))],
)
async def register_value(
    payload: MasterDataValueCreate,
    category: str = Path(...),
    session: AsyncSession = Depends(get_session),
) -> MasterDataCategory:
    values = await MasterDataRegistry(session).register(category, payload.value)
    return MasterDataCategory(category=category, values=values)
