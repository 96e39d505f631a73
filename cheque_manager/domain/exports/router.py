"""Export router - CSV downloads"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .service import ExportService

router = APIRouter(prefix="/export", tags=["Export"])


def get_export_service(db: Session = Depends(get_db)) -> ExportService:
    """Dependency injection for ExportService"""
    return ExportService(db)


@router.get("/all-cheques")
async def export_all_cheques(
    format: Optional[str] = Query(None),
    service: ExportService = Depends(get_export_service),
):
    service.check_format(format)
    return service.export_all_cheques()


@router.get("/cash-records")
async def export_cash_records(
    format: Optional[str] = Query(None),
    month: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    service: ExportService = Depends(get_export_service),
):
    service.check_format(format)
    return service.export_cash_records(month)


@router.get("/pending-cheques")
async def export_pending_cheques(
    format: Optional[str] = Query(None),
    service: ExportService = Depends(get_export_service),
):
    service.check_format(format)
    return service.export_pending_cheques()


@router.get("/summary-report")
async def export_summary_report(
    format: Optional[str] = Query(None),
    month: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    service: ExportService = Depends(get_export_service),
):
    """Metric/value summary, optionally narrowed to one month"""
    service.check_format(format)
    return service.export_summary_report(month)
