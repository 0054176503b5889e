from __future__ import annotations

import io
from datetime import date
from typing import Optional

import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.deps import get_current_active_user, get_session
from pipetrack.schemas.reports import DashboardStats, ProgressReport
from pipetrack.services.reports import ReportService

# PUBLIC_INTERFACE
router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    dependencies=[Depends(get_current_active_user)],
)


def _export_dataframe(df: pd.DataFrame, filename_base: str, export_format: str) -> StreamingResponse:
    """
    Convert DataFrame to the requested format and return a StreamingResponse.

    Only CSV is supported.
    """
    export_format = (export_format or "csv").lower()
    if export_format != "csv":
        raise HTTPException(status_code=400, detail=f"Unsupported export format '{export_format}'; use csv")
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    buffer.seek(0)
    headers = {"Content-Disposition": f'attachment; filename="{filename_base}.csv"'}
    return StreamingResponse(buffer, media_type="text/csv", headers=headers)


# PUBLIC_INTERFACE
@router.get(
    "/progress",
    response_model=ProgressReport,
    summary="Order progress report",
    description="One row per sub-order of every non-deleted order, with progress percentages and totals.",
)
async def progress_report(
    session: AsyncSession = Depends(get_session),
    order_no: Optional[str] = Query(None, description="Filter by order number"),
    workshop: Optional[str] = Query(None, description="Filter by order workshop"),
    status: Optional[str] = Query(None, description="Filter by sub-order status"),
) -> ProgressReport:
    return await ReportService(session).progress_report(order_no=order_no, workshop=workshop, status=status)


# PUBLIC_INTERFACE
@router.get(
    "/progress/export",
    summary="Export order progress report",
    description="Same rows as the progress report as a downloadable file.",
    response_description="File stream (CSV)",
)
async def export_progress_report(
    session: AsyncSession = Depends(get_session),
    order_no: Optional[str] = Query(None, description="Filter by order number"),
    workshop: Optional[str] = Query(None, description="Filter by order workshop"),
    status: Optional[str] = Query(None, description="Filter by sub-order status"),
    format: str = Query("csv", description="Export format: csv"),
):
    df = await ReportService(session).progress_frame(order_no=order_no, workshop=workshop, status=status)
    return _export_dataframe(df, "order_progress", format)


# PUBLIC_INTERFACE
@router.get(
    "/dashboard",
    response_model=DashboardStats,
    summary="Dashboard figures",
    description="Pipes packaged and shipped today (UTC), order counts per status and pending plans.",
)
async def dashboard(
    session: AsyncSession = Depends(get_session),
    day: Optional[date] = Query(None, description="Day to report (defaults to today, UTC)"),
) -> DashboardStats:
    return await ReportService(session).dashboard(day)
