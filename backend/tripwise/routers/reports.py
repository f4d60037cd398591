"""Reports router: PDF/CSV export endpoints."""

import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.database import get_db
from tripwise.services.export_service import export_service

router = APIRouter()


@router.get("/trips/{trip_id}/cost-forecast.pdf")
async def forecast_pdf(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Download the collected cost forecast as PDF."""
    pdf_bytes = await export_service.forecast_pdf(db, trip_id)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=cost_forecast_{trip_id}.pdf"},
    )


@router.get("/trips/{trip_id}/cost-forecast.csv")
async def forecast_csv(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Download the forecast line items as CSV."""
    content = await export_service.forecast_csv(db, trip_id)
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=cost_forecast_{trip_id}.csv"},
    )


@router.get("/trips/{trip_id}/settlement.pdf")
async def settlement_pdf(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    pdf_bytes = await export_service.settlement_pdf(db, trip_id)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=settlement_{trip_id}.pdf"},
    )
