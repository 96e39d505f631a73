"""Payment service - Gateway orders and their link to cheques"""

import logging
import math
import time
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from ...config import (
    COMPANY_NAME,
    PAYMENT_CURRENCY,
    RAZORPAY_KEY_ID,
    RAZORPAY_KEY_SECRET,
)
from ...errors import AppError, NotFoundError
from ...models import PaymentOrder
from ...services import razorpay_service
from ...services.razorpay_service import RazorpayError
from ...shared.dates import local_today
from ...webhook_security import verify_payment_signature
from ..cheques.repository import ChequeRepository
from .repository import PaymentRepository
from .schemas import CreateOrderRequest, VerifyPaymentRequest

logger = logging.getLogger(__name__)

PAID_EVENTS = ("payment.captured", "order.paid")
FAILED_EVENTS = ("payment.failed",)


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


def serialize_order(order: PaymentOrder) -> dict[str, Any]:
    """Order row with the linked cheque's headline fields, amount in major units"""
    cheque = order.cheque
    return {
        "id": order.id,
        "order_id": order.order_id,
        "amount": order.amount / 100,
        "currency": order.currency,
        "status": order.status,
        "invoice_reference": order.invoice_reference,
        "cheque_id": order.cheque_id,
        "payment_id": order.payment_id,
        "customer_data": order.customer_data,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "cheque_number": cheque.cheque_number if cheque else None,
        "payer_name": cheque.payer_name if cheque else None,
        "cheque_amount": cheque.amount if cheque else None,
    }


def _parse_amount(raw) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


class PaymentService:
    """Service layer for payment gateway orders"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()

    async def create_order(self, data: CreateOrderRequest) -> dict[str, Any]:
        amount = _parse_amount(data.amount)
        if amount is None or amount <= 0:
            raise AppError(400, "Valid amount is required", "INVALID_AMOUNT")

        if data.chequeId is not None and not ChequeRepository.get_cheque_by_id(self.db, data.chequeId):
            raise NotFoundError("Cheque not found")

        customer = data.customerData or {}
        amount_minor = to_minor_units(amount)
        receipt = data.invoiceReference or f"receipt_{int(time.time() * 1000)}"
        notes = {
            "invoice_reference": data.invoiceReference,
            "cheque_id": str(data.chequeId) if data.chequeId is not None else None,
            "customer_name": customer.get("name") or "Guest",
            "customer_email": customer.get("email") or "",
            "customer_phone": customer.get("phone") or "",
        }

        try:
            gateway_order = await razorpay_service.create_order(
                amount_minor, PAYMENT_CURRENCY, receipt, notes
            )
        except RazorpayError as e:
            raise AppError(400, str(e), "ORDER_CREATION_FAILED") from e

        order = self.repo.create_order(
            self.db,
            order_id=gateway_order["id"],
            amount=amount_minor,
            currency=gateway_order.get("currency", PAYMENT_CURRENCY),
            status="created",
            invoice_reference=data.invoiceReference,
            cheque_id=data.chequeId,
            customer_data=customer,
        )
        logger.info(f"✅ Payment order created: {order.order_id} for amount {amount}")

        return {
            "success": True,
            "order_id": order.order_id,
            "amount": amount,
            "currency": order.currency,
            "key_id": RAZORPAY_KEY_ID,
            "receipt": gateway_order.get("receipt", receipt),
        }

    def verify_payment(self, data: VerifyPaymentRequest, today: Optional[date] = None) -> dict[str, Any]:
        """
        Confirm a checkout payment and settle the linked cheque.

        A valid signature marks the order paid; with a cheque id the cheque
        takes the payment id and moves to "paid".
        """
        if not data.order_id or not data.payment_id or not data.signature:
            raise AppError(400, "Order ID, Payment ID, and Signature are required", "MISSING_FIELDS")

        if not verify_payment_signature(
            data.order_id, data.payment_id, data.signature, RAZORPAY_KEY_SECRET
        ):
            raise AppError(400, "Invalid payment signature", "INVALID_SIGNATURE")

        order = self.repo.get_order(self.db, data.order_id)
        if order:
            self.repo.update_order_status(self.db, order, "paid", data.payment_id)
        else:
            logger.warning(f"⚠️ Verified payment for unknown order {data.order_id}")
        logger.info(f"✅ Payment verified: {data.payment_id} for order {data.order_id}")

        cheque_link = None
        if data.chequeId is not None:
            cheque_link = self.link_payment_to_cheque(data.payment_id, data.chequeId, today)

        return {
            "success": True,
            "verification": {
                "order_id": data.order_id,
                "payment_id": data.payment_id,
                "valid": True,
            },
            "chequeLink": cheque_link,
        }

    def link_payment_to_cheque(
        self, payment_id: str, cheque_id: int, today: Optional[date] = None
    ) -> dict[str, Any]:
        cheque = ChequeRepository.get_cheque_by_id(self.db, cheque_id)
        if not cheque:
            return {"success": False, "error": "Cheque not found or already updated"}

        ChequeRepository.update_cheque(
            self.db,
            cheque,
            payment_id=payment_id,
            status="paid",
            actual_clear_date=today or local_today(),
        )
        logger.info(f"✅ Payment linked to cheque: Payment {payment_id} -> Cheque {cheque_id}")
        return {"success": True, "paymentId": payment_id, "chequeId": cheque_id}

    def list_orders(self, status: Optional[str], limit: int, offset: int) -> dict[str, Any]:
        limit = limit if limit > 0 else 50
        offset = max(offset, 0)
        orders = [serialize_order(o) for o in self.repo.list_orders(self.db, status, limit, offset)]
        return {
            "orders": orders,
            "pagination": {"limit": limit, "offset": offset, "total": len(orders)},
        }

    def get_order(self, order_id: str) -> dict[str, Any]:
        order = self.repo.get_order(self.db, order_id)
        if not order:
            raise NotFoundError("Payment order not found", code="ORDER_NOT_FOUND")
        return serialize_order(order)

    def handle_webhook_event(self, event: dict[str, Any]) -> Optional[str]:
        """
        Apply a verified webhook event to the matching order.

        Returns the order's new status, or None when the event is ignored.
        """
        event_type = event.get("event")
        payload = event.get("payload") or {}
        payment = (payload.get("payment") or {}).get("entity") or {}
        order_entity = (payload.get("order") or {}).get("entity") or {}
        order_id = payment.get("order_id") or order_entity.get("id")

        logger.info(f"🔔 Webhook received: {event_type} for order {order_id}")

        if event_type in PAID_EVENTS:
            new_status = "paid"
        elif event_type in FAILED_EVENTS:
            new_status = "failed"
        else:
            return None

        order = self.repo.get_order(self.db, order_id) if order_id else None
        if not order:
            logger.warning(f"⚠️ Webhook {event_type} references unknown order {order_id}")
            return None

        # A late failure notice must not undo a captured payment
        if order.status == "paid" and new_status == "failed":
            return order.status

        self.repo.update_order_status(self.db, order, new_status, payment.get("id"))
        return new_status

    @staticmethod
    def get_config() -> dict[str, Any]:
        return {"keyId": RAZORPAY_KEY_ID, "currency": PAYMENT_CURRENCY, "companyName": COMPANY_NAME}
