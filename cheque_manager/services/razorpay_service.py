"""
Razorpay Service
Thin client for the Razorpay Orders REST API
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import RAZORPAY_API_URL, RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET

logger = logging.getLogger(__name__)


class RazorpayError(Exception):
    """Raised when the gateway rejects a request or cannot be reached"""

    pass


def _auth() -> tuple[str, str]:
    if not RAZORPAY_KEY_ID or not RAZORPAY_KEY_SECRET:
        raise RazorpayError("Payment gateway is not configured")
    return RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET


def _error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error", {})
    except ValueError:
        return f"Gateway returned HTTP {response.status_code}"
    return error.get("description") or f"Gateway returned HTTP {response.status_code}"


async def create_order(
    amount: int,
    currency: str,
    receipt: str,
    notes: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create an order on the gateway

    Args:
        amount: Amount in the currency's smallest unit (paise for INR)
        currency: ISO currency code
        receipt: Merchant receipt reference
        notes: Free-form key/value notes stored with the order

    Returns:
        The gateway's order object (id, amount, currency, receipt, status, ...)
    """
    payload = {
        "amount": amount,
        "currency": currency,
        "receipt": receipt,
        "payment_capture": 1,
        "notes": {k: v for k, v in (notes or {}).items() if v is not None},
    }

    try:
        async with httpx.AsyncClient(timeout=30.0) as http_client:
            response = await http_client.post(
                f"{RAZORPAY_API_URL}/orders",
                auth=_auth(),
                json=payload,
                headers={"Content-Type": "application/json"},
            )
    except httpx.HTTPError as e:
        logger.error(f"❌ Razorpay request failed: {e}")
        raise RazorpayError(f"Could not reach payment gateway: {e}") from e

    if response.status_code not in (200, 201):
        message = _error_message(response)
        logger.error(f"❌ Razorpay order creation failed ({response.status_code}): {message}")
        raise RazorpayError(message)

    order = response.json()
    logger.info(f"✅ Razorpay order created: {order.get('id')}")
    return order
