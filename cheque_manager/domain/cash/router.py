"""Cash router - FastAPI endpoints for cash receipts"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import CashRecordCreate, CashRecordResponse, CashRecordUpdate
from .service import CashService

router = APIRouter(prefix="/cash", tags=["Cash"])


def get_cash_service(db: Session = Depends(get_db)) -> CashService:
    """Dependency injection for CashService"""
    return CashService(db)


@router.post("", status_code=201)
@router.post("/", status_code=201, include_in_schema=False)
async def create_cash_record(
    data: CashRecordCreate,
    service: CashService = Depends(get_cash_service),
):
    record = service.create_record(data)
    return {"data": CashRecordResponse.model_validate(record), "error": None}


@router.get("")
@router.get("/", include_in_schema=False)
async def list_cash_records(
    page: int = Query(1),
    limit: int = Query(10),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    reference_person: Optional[str] = Query(None),
    service: CashService = Depends(get_cash_service),
):
    return service.list_records(page, limit, start_date, end_date, reference_person)


@router.get("/total")
async def get_cash_total(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: CashService = Depends(get_cash_service),
):
    """Sum of cash received, optionally within an inclusive date range"""
    return {"data": {"total": service.get_total(start_date, end_date)}, "error": None}


@router.get("/{record_id}")
async def get_cash_record(
    record_id: int,
    service: CashService = Depends(get_cash_service),
):
    record = service.get_record(record_id)
    return {"data": CashRecordResponse.model_validate(record), "error": None}


@router.put("/{record_id}")
async def update_cash_record(
    record_id: int,
    data: CashRecordUpdate,
    service: CashService = Depends(get_cash_service),
):
    record = service.update_record(record_id, data)
    return {"data": CashRecordResponse.model_validate(record), "error": None}


@router.delete("/{record_id}")
async def delete_cash_record(
    record_id: int,
    service: CashService = Depends(get_cash_service),
):
    return {"data": service.delete_record(record_id), "error": None}
