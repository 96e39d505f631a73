from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from cheque_manager.services import razorpay_service
from cheque_manager.shared.dates import local_today
from cheque_manager.webhook_security import compute_hmac_sha256, payment_signature

KEY_SECRET = "test_key_secret"
WEBHOOK_SECRET = "test_webhook_secret"


@pytest.fixture
def gateway(monkeypatch):
    """Replace the gateway call with an in-memory fake and record each request"""
    calls = []

    async def fake_create_order(amount, currency, receipt, notes=None):
        calls.append({"amount": amount, "currency": currency, "receipt": receipt, "notes": notes})
        return {
            "id": f"order_test_{len(calls)}",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }

    monkeypatch.setattr(razorpay_service, "create_order", fake_create_order)
    return calls


def _create_order(client, **payload) -> dict:
    response = client.post("/api/payments/create-order", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _webhook(client, event: dict, secret: str = WEBHOOK_SECRET):
    body = json.dumps(event).encode("utf-8")
    return client.post(
        "/api/payments/webhook",
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-Razorpay-Signature": compute_hmac_sha256(secret, body),
        },
    )


def test_create_order_converts_to_paise(client, gateway) -> None:
    data = _create_order(
        client,
        amount="1499.99",
        invoiceReference="INV-55",
        customerData={"name": "Asha", "email": "asha@example.com"},
    )

    assert data == {
        "success": True,
        "order_id": "order_test_1",
        "amount": 1499.99,
        "currency": "INR",
        "key_id": "rzp_test_key",
        "receipt": "INV-55",
    }
    assert gateway[0]["amount"] == 149999
    assert gateway[0]["notes"]["customer_name"] == "Asha"
    assert gateway[0]["notes"]["invoice_reference"] == "INV-55"


def test_create_order_generates_receipt(client, gateway) -> None:
    data = _create_order(client, amount=10)
    assert data["receipt"].startswith("receipt_")
    assert gateway[0]["notes"]["customer_name"] == "Guest"


@pytest.mark.parametrize("amount", [None, 0, -5, "abc", "NaN", "inf", "-inf"])
def test_create_order_rejects_invalid_amount(client, gateway, amount) -> None:
    response = client.post("/api/payments/create-order", json={"amount": amount})
    assert response.status_code == 400
    assert response.json()["error"] == {"message": "Valid amount is required", "code": "INVALID_AMOUNT"}
    assert gateway == []


def test_create_order_for_unknown_cheque(client, gateway) -> None:
    response = client.post("/api/payments/create-order", json={"amount": 100, "chequeId": 404})
    assert response.status_code == 404
    assert gateway == []


def test_create_order_gateway_failure(client, monkeypatch) -> None:
    async def failing_create_order(amount, currency, receipt, notes=None):
        raise razorpay_service.RazorpayError("The api key provided is invalid")

    monkeypatch.setattr(razorpay_service, "create_order", failing_create_order)
    response = client.post("/api/payments/create-order", json={"amount": 100})
    assert response.status_code == 400
    assert response.json()["error"] == {
        "message": "The api key provided is invalid",
        "code": "ORDER_CREATION_FAILED",
    }


def test_verify_payment_marks_order_and_cheque_paid(client, gateway, create_cheque) -> None:
    cheque = create_cheque(cheque_number="PAY1", amount=2500)
    order = _create_order(client, amount=2500, chequeId=cheque["id"])

    response = client.post(
        "/api/payments/verify",
        json={
            "order_id": order["order_id"],
            "payment_id": "pay_123",
            "signature": payment_signature(order["order_id"], "pay_123", KEY_SECRET),
            "chequeId": cheque["id"],
        },
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["success"] is True
    assert data["verification"]["valid"] is True
    assert data["chequeLink"] == {"success": True, "paymentId": "pay_123", "chequeId": cheque["id"]}

    stored = client.get(f"/api/payments/orders/{order['order_id']}").json()["data"]
    assert stored["status"] == "paid"
    assert stored["payment_id"] == "pay_123"
    assert stored["amount"] == 2500
    assert stored["cheque_number"] == "PAY1"

    settled = client.get(f"/api/cheques/{cheque['id']}").json()["data"]
    assert settled["status"] == "paid"
    assert settled["payment_id"] == "pay_123"
    assert settled["actual_clear_date"] == local_today().isoformat()


def test_verify_payment_with_missing_cheque_reports_link_failure(client, gateway) -> None:
    order = _create_order(client, amount=100)
    data = client.post(
        "/api/payments/verify",
        json={
            "order_id": order["order_id"],
            "payment_id": "pay_9",
            "signature": payment_signature(order["order_id"], "pay_9", KEY_SECRET),
            "chequeId": 999,
        },
    ).json()["data"]
    assert data["success"] is True
    assert data["chequeLink"]["success"] is False


def test_verify_payment_rejects_bad_signature(client, gateway) -> None:
    order = _create_order(client, amount=100)
    response = client.post(
        "/api/payments/verify",
        json={"order_id": order["order_id"], "payment_id": "pay_1", "signature": "0" * 64},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SIGNATURE"

    stored = client.get(f"/api/payments/orders/{order['order_id']}").json()["data"]
    assert stored["status"] == "created"


def test_verify_payment_rejects_non_ascii_signature(client, gateway) -> None:
    order = _create_order(client, amount=100)
    response = client.post(
        "/api/payments/verify",
        json={"order_id": order["order_id"], "payment_id": "pay_1", "signature": "é"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SIGNATURE"


def test_verify_payment_requires_all_fields(client) -> None:
    response = client.post("/api/payments/verify", json={"order_id": "order_1"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_FIELDS"


def test_list_and_get_orders(client, gateway) -> None:
    _create_order(client, amount=10)
    _create_order(client, amount=20)

    data = client.get("/api/payments/orders", params={"status": "created"}).json()["data"]
    assert data["pagination"] == {"limit": 50, "offset": 0, "total": 2}
    assert {o["order_id"] for o in data["orders"]} == {"order_test_1", "order_test_2"}

    missing = client.get("/api/payments/orders/order_missing")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "ORDER_NOT_FOUND"


def test_webhook_payment_captured_marks_order_paid(client, gateway) -> None:
    order = _create_order(client, amount=10)
    event = {
        "event": "payment.captured",
        "payload": {"payment": {"entity": {"id": "pay_777", "order_id": order["order_id"]}}},
    }

    response = _webhook(client, event)
    assert response.status_code == 200
    assert response.json() == {"data": {"received": True}, "error": None}

    stored = client.get(f"/api/payments/orders/{order['order_id']}").json()["data"]
    assert stored["status"] == "paid"
    assert stored["payment_id"] == "pay_777"

    # A late failure does not undo the capture
    failed = {
        "event": "payment.failed",
        "payload": {"payment": {"entity": {"id": "pay_778", "order_id": order["order_id"]}}},
    }
    _webhook(client, failed)
    stored = client.get(f"/api/payments/orders/{order['order_id']}").json()["data"]
    assert stored["status"] == "paid"


def test_webhook_payment_failed(client, gateway) -> None:
    order = _create_order(client, amount=10)
    _webhook(
        client,
        {
            "event": "payment.failed",
            "payload": {"payment": {"entity": {"id": "pay_1", "order_id": order["order_id"]}}},
        },
    )
    stored = client.get(f"/api/payments/orders/{order['order_id']}").json()["data"]
    assert stored["status"] == "failed"


def test_webhook_ignores_unknown_events(client) -> None:
    response = _webhook(client, {"event": "refund.created", "payload": {}})
    assert response.status_code == 200


def test_webhook_rejects_bad_signature(client) -> None:
    response = _webhook(client, {"event": "payment.captured"}, secret="wrong")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "WEBHOOK_VERIFICATION_FAILED"


def test_webhook_rejects_non_ascii_signature(client) -> None:
    response = client.post(
        "/api/payments/webhook",
        content=b'{"event": "payment.captured"}',
        headers={"X-Razorpay-Signature": "sig-é".encode("latin-1")},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "WEBHOOK_VERIFICATION_FAILED"


def test_webhook_rejects_missing_signature(client) -> None:
    response = client.post("/api/payments/webhook", json={"event": "payment.captured"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "WEBHOOK_VERIFICATION_FAILED"


def test_webhook_rejects_non_json_body(client) -> None:
    body = b"not json"
    response = client.post(
        "/api/payments/webhook",
        content=body,
        headers={"X-Razorpay-Signature": compute_hmac_sha256(WEBHOOK_SECRET, body)},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PAYLOAD"


def test_payment_config(client) -> None:
    data = client.get("/api/payments/config").json()["data"]
    assert data["keyId"] == "rzp_test_key"
    assert data["currency"] == "INR"


def test_gateway_client_posts_order(monkeypatch) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "order_abc", "amount": 5000, "currency": "INR"})

    real_async_client = httpx.AsyncClient
    monkeypatch.setattr(
        razorpay_service.httpx,
        "AsyncClient",
        lambda **kwargs: real_async_client(transport=httpx.MockTransport(handler), **kwargs),
    )

    order = asyncio.run(razorpay_service.create_order(5000, "INR", "rcpt_1", {"cheque_id": None}))

    assert order["id"] == "order_abc"
    assert seen["url"].endswith("/orders")
    assert seen["auth"].startswith("Basic ")
    assert seen["body"] == {
        "amount": 5000,
        "currency": "INR",
        "receipt": "rcpt_1",
        "payment_capture": 1,
        "notes": {},
    }


def test_gateway_client_raises_on_rejection(monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"description": "amount exceeds maximum"}})

    real_async_client = httpx.AsyncClient
    monkeypatch.setattr(
        razorpay_service.httpx,
        "AsyncClient",
        lambda **kwargs: real_async_client(transport=httpx.MockTransport(handler), **kwargs),
    )

    with pytest.raises(razorpay_service.RazorpayError, match="amount exceeds maximum"):
        asyncio.run(razorpay_service.create_order(5000, "INR", "rcpt_1"))


def test_gateway_client_requires_credentials(monkeypatch) -> None:
    monkeypatch.setattr(razorpay_service, "RAZORPAY_KEY_SECRET", None)
    with pytest.raises(razorpay_service.RazorpayError, match="not configured"):
        asyncio.run(razorpay_service.create_order(100, "INR", "rcpt_1"))
