"""
Diagnostics Routes
Operational endpoints for checking e-mail delivery and the reminder job
"""

import logging
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import email_service
from ..config import REMINDER_DAYS_BEFORE, REMINDER_EMAIL
from ..database import get_db
from ..services import reminders
from ..shared.dates import local_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/test", tags=["Diagnostics"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sample_cheque() -> SimpleNamespace:
    """Unsaved cheque due REMINDER_DAYS_BEFORE days from today"""
    due = local_today() + timedelta(days=REMINDER_DAYS_BEFORE)
    return SimpleNamespace(
        id=999,
        cheque_number="CHQ999",
        amount=50000.0,
        payer_name="Test Company",
        expected_clear_date=due,
        actual_clear_date=None,
    )


@router.get("/send-email")
async def send_test_email():
    """Send a sample reminder e-mail to REMINDER_EMAIL"""
    test_cheque = _sample_cheque()
    cheque_payload = {
        "id": test_cheque.id,
        "cheque_number": test_cheque.cheque_number,
        "amount": test_cheque.amount,
        "payer_name": test_cheque.payer_name,
        "expected_clear_date": test_cheque.expected_clear_date.isoformat(),
    }

    if not REMINDER_EMAIL:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "REMINDER_EMAIL is not configured",
                "testCheque": cheque_payload,
            },
        )

    logger.info(f"📧 Testing email functionality with test cheque: {cheque_payload}")
    try:
        response = await email_service.send_cheque_reminder(test_cheque, REMINDER_EMAIL)
    except email_service.EmailDeliveryError as e:
        logger.error(f"❌ Email test error: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Failed to send test email",
                "error": str(e),
                "testCheque": cheque_payload,
            },
        )

    return {
        "success": True,
        "message": "Test email sent successfully",
        "messageId": response.get("id") if isinstance(response, dict) else None,
        "testCheque": cheque_payload,
    }


@router.get("/reminder-status")
async def get_reminder_status(db: Session = Depends(get_db)):
    return {
        "success": True,
        "reminderJobStatus": reminders.get_status(db),
        "timestamp": _timestamp(),
    }


@router.post("/trigger-reminders")
async def trigger_reminders(db: Session = Depends(get_db)):
    """Run the reminder pass now, regardless of ENABLE_REMINDERS"""
    logger.info("🔄 Manual trigger of reminder processing via API...")
    summary = await reminders.process_reminders(db, trigger="manual")
    return {
        "success": True,
        "message": "Reminder processing triggered manually",
        "summary": summary,
        "timestamp": _timestamp(),
    }
