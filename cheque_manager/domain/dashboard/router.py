"""Dashboard router - summary and analytics endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db)


@router.get("/summary")
async def get_summary(service: DashboardService = Depends(get_dashboard_service)):
    """Headline totals for the dashboard cards"""
    return service.get_summary()


@router.get("/pending-cheques")
async def get_pending_cheques(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_pending_cheques()


@router.get("/bounced-cheques")
async def get_bounced_cheques(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_bounced_cheques()


@router.get("/cash-today")
async def get_cash_today(service: DashboardService = Depends(get_dashboard_service)):
    return {"data": service.get_cash_today(), "error": None}


@router.get("/payment-status")
async def get_payment_status(
    invoice_id: Optional[str] = Query(None),
    service: DashboardService = Depends(get_dashboard_service),
):
    """How much has been received against an invoice reference"""
    return {"data": service.get_payment_status(invoice_id), "error": None}


@router.get("/monthly-stats")
async def get_monthly_stats(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    service: DashboardService = Depends(get_dashboard_service),
):
    return {"data": service.get_monthly_stats(year), "error": None}


# ============================================================================
# ANALYTICS
# ============================================================================


@router.get("/trends")
async def get_trends(
    months: int = Query(6),
    service: DashboardService = Depends(get_dashboard_service),
):
    return {"data": service.get_trends(months), "error": None}


@router.get("/status-breakdown")
async def get_status_breakdown(service: DashboardService = Depends(get_dashboard_service)):
    return {"data": service.get_status_breakdown(), "error": None}


@router.get("/top-payers")
async def get_top_payers(
    limit: int = Query(5),
    service: DashboardService = Depends(get_dashboard_service),
):
    return {"data": service.get_top_payers(limit), "error": None}


@router.get("/key-metrics")
async def get_key_metrics(service: DashboardService = Depends(get_dashboard_service)):
    return {"data": service.get_key_metrics(), "error": None}
