"""
Webhook Security Module

Signature verification for the payment gateway:
- Checkout signatures: HMAC-SHA256 of "order_id|payment_id" keyed with the API secret
- Webhook signatures: HMAC-SHA256 of the raw request body keyed with the webhook secret
Both are compared in constant time.
"""

import hashlib
import hmac
import logging
from typing import Optional

from fastapi import Request

logger = logging.getLogger(__name__)

WEBHOOK_SIGNATURE_HEADER = "x-razorpay-signature"


class WebhookSignatureError(Exception):
    """Raised when webhook signature verification fails"""

    pass


def constant_time_compare(a: Optional[str], b: Optional[str]) -> bool:
    """
    Compare two strings in constant time.
    Uses hmac.compare_digest which is designed for this purpose.
    """
    if not a or not b:
        return False
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    return compute_hmac_sha256(secret, f"{order_id}|{payment_id}".encode("utf-8"))


def verify_payment_signature(
    order_id: str, payment_id: str, signature: str, secret: Optional[str]
) -> bool:
    """Check the signature the checkout widget returns after a successful payment"""
    if not secret:
        logger.error("❌ Payment signature check attempted without a key secret configured")
        return False

    is_valid = constant_time_compare(payment_signature(order_id, payment_id, secret), signature)
    if not is_valid:
        logger.warning(f"🚫 Payment signature mismatch for order {order_id}")
    return is_valid


async def verify_razorpay_webhook(request: Request, secret: Optional[str]) -> bytes:
    """
    Verify a gateway webhook and return its raw body.

    Args:
        request: FastAPI request object
        secret: Webhook secret from the gateway dashboard

    Returns:
        The raw request body, read before any JSON parsing

    Raises:
        WebhookSignatureError: If the header or secret is missing, or the signature does not match
    """
    # Get raw body BEFORE any parsing - the signature covers the exact bytes
    raw_body = await request.body()
    signature = request.headers.get(WEBHOOK_SIGNATURE_HEADER, "")

    if not signature:
        logger.error("❌ Missing X-Razorpay-Signature header")
        raise WebhookSignatureError("Missing webhook signature")

    if not secret:
        logger.error("❌ RAZORPAY_WEBHOOK_SECRET is not configured")
        raise WebhookSignatureError("Webhook secret not configured")

    expected = compute_hmac_sha256(secret, raw_body)
    if not constant_time_compare(expected, signature):
        logger.error(f"❌ Webhook signature mismatch ({len(raw_body)} byte body)")
        raise WebhookSignatureError("Invalid webhook signature")

    logger.info("✅ Webhook signature verified")
    return raw_body
