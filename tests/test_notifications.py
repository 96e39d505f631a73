from __future__ import annotations

import asyncio
import threading
from datetime import date
from types import SimpleNamespace

import pytest

from cheque_manager import email_service
from cheque_manager.email_templates import (
    bounce_alert_template,
    cheque_reminder_template,
    overdue_alert_template,
)
from cheque_manager.shared.formatters import format_amount, format_display_date, pluralize_days


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "₹0"),
        (999, "₹999"),
        (1000, "₹1,000"),
        (123456.5, "₹1,23,456.50"),
        (10000000, "₹1,00,00,000"),
        (-2500.25, "-₹2,500.25"),
        (None, "₹0"),
    ],
)
def test_format_amount_uses_indian_grouping(amount, expected) -> None:
    assert format_amount(amount) == expected


def test_format_amount_other_currency() -> None:
    assert format_amount(1234567, "USD") == "$1,234,567"


def test_display_helpers() -> None:
    assert format_display_date(date(2026, 3, 9)) == "09/03/2026"
    assert format_display_date(None) == "N/A"
    assert pluralize_days(1) == "1 day"
    assert pluralize_days(0) == "0 days"


def test_reminder_template_content() -> None:
    mjml = cheque_reminder_template(
        cheque_id=7,
        cheque_number="CHQ<7>",
        amount=50000,
        payer_name="Gupta & Co",
        expected_clear_date=date(2026, 4, 2),
        days_remaining=3,
    )
    assert "CHQ&lt;7&gt;" in mjml
    assert "Gupta &amp; Co" in mjml
    assert "₹50,000" in mjml
    assert "02/04/2026" in mjml
    assert "3 days" in mjml
    assert 'href="http://localhost:5000/api/cheques/7"' in mjml
    assert "Acme Receivables" in mjml


def test_bounce_template_includes_bounce_date() -> None:
    mjml = bounce_alert_template(1, "B1", 100, None, None, bounce_date=date(2026, 5, 1))
    assert "Bounced On" in mjml
    assert "01/05/2026" in mjml
    assert "BOUNCED" in mjml

    without_date = bounce_alert_template(1, "B1", 100, "X", date(2026, 4, 1))
    assert "Bounced On" not in without_date


def test_overdue_template_content() -> None:
    mjml = overdue_alert_template(2, "O1", 1500, "Payer", date(2026, 4, 1), days_overdue=1)
    assert "Days Overdue" in mjml
    assert "1 day" in mjml
    assert "Was Due On" in mjml


def test_send_email_requires_api_key(monkeypatch) -> None:
    monkeypatch.setattr(email_service, "RESEND_API_KEY", None)
    with pytest.raises(email_service.EmailDeliveryError, match="not configured"):
        asyncio.run(email_service.send_email("a@example.com", "Hi", "<mjml></mjml>"))


@pytest.fixture
def resend_outbox(monkeypatch):
    sent = []

    def fake_send(params):
        sent.append(params)
        return {"id": "re_msg_1"}

    monkeypatch.setattr(email_service, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_service, "mjml_to_html", lambda mjml: {"html": "<html>ok</html>", "errors": []})
    monkeypatch.setattr(email_service.resend.Emails, "send", fake_send)
    return sent


def test_send_email_hands_html_to_resend(resend_outbox) -> None:
    response = asyncio.run(email_service.send_email("a@example.com", "Hello", "<mjml></mjml>"))

    assert response == {"id": "re_msg_1"}
    assert resend_outbox == [
        {
            "from": email_service.EMAIL_FROM_ADDRESS,
            "to": ["a@example.com"],
            "subject": "Hello",
            "html": "<html>ok</html>",
        }
    ]


def test_send_email_wraps_provider_errors(monkeypatch, resend_outbox) -> None:
    def failing_send(params):
        raise RuntimeError("rate limited")

    monkeypatch.setattr(email_service.resend.Emails, "send", failing_send)
    with pytest.raises(email_service.EmailDeliveryError, match="rate limited"):
        asyncio.run(email_service.send_email("a@example.com", "Hello", "<mjml></mjml>"))


def test_notification_subjects(resend_outbox) -> None:
    cheque = SimpleNamespace(
        id=3,
        cheque_number="CHQ3",
        amount=2500,
        payer_name="Payer",
        expected_clear_date=date(2026, 6, 13),
        actual_clear_date=date(2026, 6, 12),
    )
    today = date(2026, 6, 10)

    asyncio.run(email_service.send_cheque_reminder(cheque, "o@example.com", today=today))
    asyncio.run(email_service.send_bounce_alert(cheque, "o@example.com"))
    asyncio.run(email_service.send_payment_overdue_alert(cheque, "o@example.com", today=date(2026, 6, 20)))

    assert [m["subject"] for m in resend_outbox] == [
        "Payment Reminder: Cheque CHQ3",
        "⚠️ Cheque Bounced: CHQ3",
        "🔴 URGENT: Overdue Payment - Cheque CHQ3",
    ]


def test_send_email_calls_provider_off_the_event_loop(monkeypatch, resend_outbox) -> None:
    threads = []

    def recording_send(params):
        threads.append(threading.get_ident())
        return {"id": "re_msg_2"}

    monkeypatch.setattr(email_service.resend.Emails, "send", recording_send)

    async def send_and_note_loop_thread():
        loop_thread = threading.get_ident()
        await email_service.send_email("a@example.com", "Hello", "<mjml></mjml>")
        return loop_thread

    loop_thread = asyncio.run(send_and_note_loop_thread())

    assert len(threads) == 1
    assert threads[0] != loop_thread
