"""Payment router - gateway order, verification and webhook endpoints"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ...config import RAZORPAY_WEBHOOK_SECRET
from ...database import get_db
from ...errors import AppError
from ...webhook_security import WebhookSignatureError, verify_razorpay_webhook
from .schemas import CreateOrderRequest, VerifyPaymentRequest
from .service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


@router.post("/create-order", status_code=201)
async def create_order(
    data: CreateOrderRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """Create a gateway order, optionally tied to an invoice or cheque"""
    return {"data": await service.create_order(data), "error": None}


@router.post("/verify")
async def verify_payment(
    data: VerifyPaymentRequest,
    service: PaymentService = Depends(get_payment_service),
):
    return {"data": service.verify_payment(data), "error": None}


@router.get("/orders")
async def list_orders(
    status: Optional[str] = Query(None),
    limit: int = Query(50),
    offset: int = Query(0),
    service: PaymentService = Depends(get_payment_service),
):
    return {"data": service.list_orders(status, limit, offset), "error": None}


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    service: PaymentService = Depends(get_payment_service),
):
    return {"data": service.get_order(order_id), "error": None}


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    """Gateway webhook; the signature covers the raw body"""
    try:
        raw_body = await verify_razorpay_webhook(request, RAZORPAY_WEBHOOK_SECRET)
    except WebhookSignatureError as e:
        logger.warning(f"🚫 Rejected payment webhook: {e}")
        raise AppError(400, "Webhook verification failed", "WEBHOOK_VERIFICATION_FAILED") from e

    try:
        event = json.loads(raw_body)
    except ValueError as e:
        raise AppError(400, "Webhook body is not valid JSON", "INVALID_PAYLOAD") from e

    service.handle_webhook_event(event if isinstance(event, dict) else {})
    return {"data": {"received": True}, "error": None}


@router.get("/config")
async def get_payment_config():
    """Public checkout configuration for the frontend"""
    return {"data": PaymentService.get_config(), "error": None}
