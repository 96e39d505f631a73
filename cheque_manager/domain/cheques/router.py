"""Cheque router - FastAPI endpoints for cheque operations"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.reminders import send_bounce_alert_for_cheque
from .schemas import ChequeCreate, ChequeResponse, ChequeStatusUpdate, ChequeUpdate
from .service import ChequeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cheques", tags=["Cheques"])


def get_cheque_service(db: Session = Depends(get_db)) -> ChequeService:
    """Dependency injection for ChequeService"""
    return ChequeService(db)


@router.post("", status_code=201)
@router.post("/", status_code=201, include_in_schema=False)
async def create_cheque(
    data: ChequeCreate,
    service: ChequeService = Depends(get_cheque_service),
):
    """Record a newly received cheque"""
    cheque = service.create_cheque(data)
    return {"data": ChequeResponse.model_validate(cheque), "error": None}


@router.get("")
@router.get("/", include_in_schema=False)
async def list_cheques(
    status: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(10),
    service: ChequeService = Depends(get_cheque_service),
):
    return service.list_cheques(status, page, limit)


# Declared before /{cheque_id} so "calendar" is not parsed as an id
@router.get("/calendar")
async def get_cheque_calendar(
    month: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    service: ChequeService = Depends(get_cheque_service),
):
    """Cheques due in the given month, grouped by expected clear date"""
    return service.get_calendar(month)


@router.get("/{cheque_id}")
async def get_cheque(
    cheque_id: int,
    service: ChequeService = Depends(get_cheque_service),
):
    cheque = service.get_cheque(cheque_id)
    return {"data": ChequeResponse.model_validate(cheque), "error": None}


@router.put("/{cheque_id}")
async def update_cheque(
    cheque_id: int,
    data: ChequeUpdate,
    background_tasks: BackgroundTasks,
    service: ChequeService = Depends(get_cheque_service),
):
    previous_status = service.get_cheque(cheque_id).status
    cheque = service.update_cheque(cheque_id, data)
    if cheque.status == "bounced" and previous_status != "bounced":
        background_tasks.add_task(send_bounce_alert_for_cheque, cheque.id)
    return {"data": ChequeResponse.model_validate(cheque), "error": None}


@router.patch("/{cheque_id}/status")
async def update_cheque_status(
    cheque_id: int,
    data: ChequeStatusUpdate,
    background_tasks: BackgroundTasks,
    service: ChequeService = Depends(get_cheque_service),
):
    """Move a cheque through pending → deposited → cleared/bounced"""
    cheque, bounced = service.update_status(cheque_id, data.status)
    if bounced:
        background_tasks.add_task(send_bounce_alert_for_cheque, cheque.id)
    return {"data": ChequeResponse.model_validate(cheque), "error": None}


@router.delete("/{cheque_id}")
async def delete_cheque(
    cheque_id: int,
    service: ChequeService = Depends(get_cheque_service),
):
    return {"data": service.delete_cheque(cheque_id), "error": None}
