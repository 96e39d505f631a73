"""
Cheque Reminder Job
Daily pass over pending cheques that e-mails upcoming-clearance reminders and
overdue alerts. Runs from the arq worker cron, and on demand through the
diagnostics endpoints.
"""

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import email_service
from ..config import APP_TIMEZONE, ENABLE_REMINDERS, REMINDER_DAYS_BEFORE, REMINDER_EMAIL, REMINDER_TIME
from ..database import SessionLocal
from ..domain.cheques.repository import ChequeRepository
from ..models import Cheque, ReminderLog, ReminderRun, UserSettings
from ..shared.dates import days_until, local_now, local_today

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_TIME = (9, 0)


def parse_time_to_cron(time_string: Optional[str]) -> tuple[int, int]:
    """
    Parse "HH:MM" into (hour, minute).

    Anything malformed or out of range falls back to 09:00.
    """
    try:
        hours, minutes = (int(part) for part in (time_string or "").split(":"))
    except ValueError:
        logger.warning(f"⚠️ Invalid time format: {time_string}. Using default 09:00")
        return DEFAULT_REMINDER_TIME

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        logger.warning(f"⚠️ Invalid time format: {time_string}. Using default 09:00")
        return DEFAULT_REMINDER_TIME
    return hours, minutes


def cron_expression(time_string: Optional[str] = None) -> str:
    hours, minutes = parse_time_to_cron(time_string or REMINDER_TIME)
    return f"{minutes} {hours} * * *"


def resolve_recipient(db: Session) -> Optional[str]:
    """
    Where notifications go: REMINDER_EMAIL, else the e-mail saved in user
    settings. Turning e-mail notifications off in settings silences both.
    """
    settings = db.query(UserSettings).first()
    if settings and not settings.email_notifications:
        return None
    if REMINDER_EMAIL:
        return REMINDER_EMAIL
    if settings and settings.email:
        return settings.email
    return None


def _already_sent(db: Session, cheque_id: int, kind: str, sent_on: date) -> bool:
    return (
        db.query(ReminderLog.id)
        .filter(
            ReminderLog.cheque_id == cheque_id,
            ReminderLog.kind == kind,
            ReminderLog.sent_on == sent_on,
        )
        .first()
        is not None
    )


def _record_sent(
    db: Session, cheque: Cheque, kind: str, sent_on: date, recipient: str, response: Any
) -> None:
    message_id = response.get("id") if isinstance(response, dict) else None
    db.add(
        ReminderLog(
            cheque_id=cheque.id,
            kind=kind,
            sent_on=sent_on,
            recipient=recipient,
            message_id=message_id,
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # Another run logged the same notification first
        db.rollback()
        logger.warning(f"⚠️ {kind} for cheque {cheque.cheque_number} already logged for {sent_on}")


def _run_summary(run: ReminderRun) -> dict[str, Any]:
    return {
        "trigger": run.trigger,
        "runDate": run.run_date.isoformat() if run.run_date else None,
        "startedAt": run.started_at.isoformat() if run.started_at else None,
        "finishedAt": run.finished_at.isoformat() if run.finished_at else None,
        "pendingChecked": run.pending_checked,
        "remindersSent": run.reminders_sent,
        "overdueAlertsSent": run.overdue_alerts_sent,
        "skipped": run.skipped,
        "errors": run.errors,
        "errorMessage": run.error_message,
    }


async def process_reminders(
    db: Session, today: Optional[date] = None, trigger: str = "manual"
) -> dict[str, Any]:
    """
    Send the day's reminders and overdue alerts.

    For every pending cheque with an expected clear date:
    - exactly REMINDER_DAYS_BEFORE days away: reminder e-mail
    - date already passed: overdue alert
    A notification already logged for the cheque today is not sent again.
    Failures are counted per cheque and never stop the loop.

    Returns:
        Summary of the run, also persisted as a ReminderRun row
    """
    today = today or local_today()
    run = ReminderRun(
        trigger=trigger,
        run_date=today,
        started_at=local_now().replace(tzinfo=None),
        pending_checked=0,
        reminders_sent=0,
        overdue_alerts_sent=0,
        skipped=0,
        errors=0,
    )
    logger.info(f"📧 Starting {trigger} reminder processing for {today}...")

    recipient = resolve_recipient(db)
    if not recipient:
        logger.error("❌ No reminder recipient configured (REMINDER_EMAIL or settings e-mail)")
        run.error_message = "No reminder recipient configured"
        run.finished_at = local_now().replace(tzinfo=None)
        db.add(run)
        db.commit()
        return _run_summary(run)

    pending = ChequeRepository.get_pending_cheques(db)
    run.pending_checked = len(pending)
    if not pending:
        logger.info("✅ No pending cheques found")
    else:
        logger.info(f"📊 Found {len(pending)} pending cheques to process")

    for cheque in pending:
        if not cheque.expected_clear_date:
            run.skipped += 1
            continue

        days_remaining = days_until(cheque.expected_clear_date, today)
        if days_remaining == REMINDER_DAYS_BEFORE:
            kind = "reminder"
        elif days_remaining < 0:
            kind = "overdue"
        else:
            continue

        if _already_sent(db, cheque.id, kind, today):
            logger.info(f"⏭️ {kind} for cheque {cheque.cheque_number} already sent today")
            run.skipped += 1
            continue

        try:
            if kind == "reminder":
                logger.info(f"⏰ Sending reminder for cheque {cheque.cheque_number} ({days_remaining} days remaining)")
                response = await email_service.send_cheque_reminder(cheque, recipient, today=today)
                run.reminders_sent += 1
            else:
                logger.info(f"🔴 Payment overdue for cheque {cheque.cheque_number} ({abs(days_remaining)} days overdue)")
                response = await email_service.send_payment_overdue_alert(cheque, recipient, today=today)
                run.overdue_alerts_sent += 1
        except Exception as e:
            run.errors += 1
            logger.error(f"❌ Failed to send {kind} for cheque {cheque.cheque_number}: {e}")
            continue

        _record_sent(db, cheque, kind, today, recipient, response)

    run.finished_at = local_now().replace(tzinfo=None)
    db.add(run)
    db.commit()

    logger.info(
        f"📈 Reminder processing completed: {run.reminders_sent} reminders sent, "
        f"{run.overdue_alerts_sent} overdue alerts sent, {run.errors} errors"
    )
    return _run_summary(run)


async def send_bounce_alert_for_cheque(cheque_id: int) -> Optional[dict]:
    """
    Background task queued when a cheque moves to "bounced".

    Opens its own session since the request's session is closed by the time it runs.
    """
    if not ENABLE_REMINDERS:
        logger.info(f"⏸️ Bounce alert for cheque {cheque_id} not sent (ENABLE_REMINDERS=false)")
        return None

    db = SessionLocal()
    try:
        cheque = ChequeRepository.get_cheque_by_id(db, cheque_id)
        if not cheque or cheque.status != "bounced":
            return None

        recipient = resolve_recipient(db)
        if not recipient:
            logger.warning(f"⚠️ No recipient for bounce alert on cheque {cheque.cheque_number}")
            return None

        today = local_today()
        if _already_sent(db, cheque.id, "bounce", today):
            return None

        try:
            response = await email_service.send_bounce_alert(cheque, recipient)
        except email_service.EmailDeliveryError as e:
            logger.error(f"❌ Failed to send bounce alert for cheque {cheque.cheque_number}: {e}")
            return None

        _record_sent(db, cheque, "bounce", today, recipient, response)
        return response
    finally:
        db.close()


def last_run(db: Session) -> Optional[dict[str, Any]]:
    run = db.query(ReminderRun).order_by(ReminderRun.started_at.desc(), ReminderRun.id.desc()).first()
    return _run_summary(run) if run else None


def get_status(db: Optional[Session] = None) -> dict[str, Any]:
    """Configuration of the reminder job plus its most recent run"""
    return {
        "isRunning": ENABLE_REMINDERS,
        "schedule": REMINDER_TIME,
        "cronSchedule": cron_expression(REMINDER_TIME),
        "reminderDaysBefore": REMINDER_DAYS_BEFORE,
        "recipientEmail": REMINDER_EMAIL,
        "enabled": ENABLE_REMINDERS,
        "timezone": APP_TIMEZONE,
        "lastRun": last_run(db) if db is not None else None,
    }
