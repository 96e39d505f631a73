"""
Email Service using Resend
Cheque notification e-mails built from MJML templates
"""

import asyncio
import logging
from datetime import date
from typing import Optional, Union

import resend
from mjml import mjml2html as mjml_to_html

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import bounce_alert_template, cheque_reminder_template, overdue_alert_template
from .models import Cheque
from .shared.dates import days_until, local_today

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailDeliveryError(Exception):
    """Raised when an e-mail could not be rendered or handed to the provider"""

    pass


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailDeliveryError(f"Failed to compile MJML template: {str(e)}") from e

    # mjml_to_html returns a dict-like object with 'html' and 'errors' keys
    if isinstance(result, dict):
        if result.get("errors"):
            logger.warning(f"MJML compilation warnings: {result['errors']}")
        return result.get("html", "")
    return str(result)


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Resend response dict (contains the message "id")
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailDeliveryError("Email service not configured")

    html_content = compile_mjml_to_html(mjml_content)
    recipients = [to] if isinstance(to, str) else to

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = await asyncio.to_thread(
            resend.Emails.send,
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            },
        )
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailDeliveryError(f"Failed to send email: {str(e)}") from e

    logger.info(f"✅ Email sent successfully via Resend: {response}")
    return response


# ============================================
# Cheque notifications
# ============================================


async def send_cheque_reminder(cheque: Cheque, to: str, today: Optional[date] = None) -> dict:
    """Remind the owner that a pending cheque is about to clear"""
    today = today or local_today()
    days_remaining = days_until(cheque.expected_clear_date, today) if cheque.expected_clear_date else 0

    response = await send_email(
        to=to,
        subject=f"Payment Reminder: Cheque {cheque.cheque_number}",
        mjml_content=cheque_reminder_template(
            cheque_id=cheque.id,
            cheque_number=cheque.cheque_number,
            amount=cheque.amount,
            payer_name=cheque.payer_name,
            expected_clear_date=cheque.expected_clear_date,
            days_remaining=days_remaining,
        ),
    )
    logger.info(f"✅ Cheque reminder sent for cheque {cheque.cheque_number} to {to}")
    return response


async def send_bounce_alert(cheque: Cheque, to: str) -> dict:
    response = await send_email(
        to=to,
        subject=f"⚠️ Cheque Bounced: {cheque.cheque_number}",
        mjml_content=bounce_alert_template(
            cheque_id=cheque.id,
            cheque_number=cheque.cheque_number,
            amount=cheque.amount,
            payer_name=cheque.payer_name,
            expected_clear_date=cheque.expected_clear_date,
            bounce_date=cheque.actual_clear_date,
        ),
    )
    logger.info(f"🚨 Bounce alert sent for cheque {cheque.cheque_number} to {to}")
    return response


async def send_payment_overdue_alert(cheque: Cheque, to: str, today: Optional[date] = None) -> dict:
    today = today or local_today()
    days_overdue = -days_until(cheque.expected_clear_date, today) if cheque.expected_clear_date else 0

    response = await send_email(
        to=to,
        subject=f"🔴 URGENT: Overdue Payment - Cheque {cheque.cheque_number}",
        mjml_content=overdue_alert_template(
            cheque_id=cheque.id,
            cheque_number=cheque.cheque_number,
            amount=cheque.amount,
            payer_name=cheque.payer_name,
            expected_clear_date=cheque.expected_clear_date,
            days_overdue=days_overdue,
        ),
    )
    logger.info(f"🔴 Overdue alert sent for cheque {cheque.cheque_number} to {to}")
    return response
