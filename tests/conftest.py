from __future__ import annotations

import os
import tempfile

# Configure before the application modules read their settings
_DB_DIR = tempfile.mkdtemp(prefix="cheque-manager-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["APP_ENV"] = "test"
os.environ["APP_TIMEZONE"] = "Asia/Kolkata"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:3000"
os.environ["PUBLIC_BASE_URL"] = "http://localhost:5000"
os.environ["COMPANY_NAME"] = "Acme Receivables"
os.environ.pop("FRONTEND_BUILD_DIR", None)
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["RESEND_API_KEY"] = ""
os.environ["ENABLE_REMINDERS"] = "false"
os.environ["REMINDER_EMAIL"] = "owner@example.com"
os.environ["REMINDER_DAYS_BEFORE"] = "3"
os.environ["REMINDER_TIME"] = "09:00"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_key_secret"
os.environ["RAZORPAY_WEBHOOK_SECRET"] = "test_webhook_secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from cheque_manager.database import Base, SessionLocal, engine  # noqa: E402
from cheque_manager.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def create_cheque(client):
    """POST a cheque with sensible defaults and return the created record"""

    def _create(**overrides) -> dict:
        payload = {
            "cheque_number": "CHQ001",
            "amount": 15000,
            "payer_name": "Sharma Traders",
            "cheque_date": "2026-01-05",
        }
        payload.update(overrides)
        response = client.post("/api/cheques", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_cash(client):
    def _create(**overrides) -> dict:
        payload = {"amount": 2500, "date": "2026-01-10", "reference_person": "Ravi"}
        payload.update(overrides)
        response = client.post("/api/cash", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
