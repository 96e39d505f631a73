"""
MJML Email Templates
Cheque notification e-mails, compiled to HTML by the email service
"""

from datetime import date
from html import escape
from typing import Optional

from .config import COMPANY_NAME, PUBLIC_BASE_URL
from .shared.formatters import format_amount, format_display_date, pluralize_days

# Slate/indigo colour scheme
THEME = {
    "primary": "#4f46e5",
    "primary_dark": "#4338ca",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#16a34a",
    "warning": "#f59e0b",
    "danger": "#dc2626",
}


def cheque_url(cheque_id: int) -> str:
    return f"{PUBLIC_BASE_URL}/api/cheques/{cheque_id}"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    accent: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""
    accent = accent or THEME["primary"]

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{accent}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{accent}" padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="18px" font-weight="700" color="#ffffff" padding="0">
              {escape(COMPANY_NAME)}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="32px 40px 40px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              This is an automated message. Please do not reply to this email.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _details_table(rows: list[tuple[str, str]], highlight: Optional[str] = None) -> str:
    """Two-column label/value table; the highlighted label's value is drawn in red"""
    cells = []
    for label, value in rows:
        style = f' style="color: {THEME["danger"]}; font-weight: 700;"' if label == highlight else ""
        cells.append(
            f"""
            <tr style="border-bottom: 1px solid {THEME['border']};">
              <td style="padding: 8px 0; color: {THEME['text_muted']}; width: 45%;">{label}</td>
              <td style="padding: 8px 0;"{style}>{value}</td>
            </tr>"""
        )
    return f"""
    <mj-table font-size="15px" color="{THEME['text_secondary']}" padding="8px 0 16px 0">
      {''.join(cells)}
    </mj-table>
    """


def cheque_reminder_template(
    cheque_id: int,
    cheque_number: str,
    amount: float,
    payer_name: Optional[str],
    expected_clear_date: Optional[date],
    days_remaining: int,
) -> str:
    """Upcoming clearance reminder MJML template"""
    number = escape(cheque_number)
    days_style = THEME["danger"] if days_remaining <= 3 else THEME["success"]

    content = f"""
    <mj-text color="{THEME['text_muted']}" padding="0 0 16px 0">
      This is an automated reminder about an upcoming cheque payment.
    </mj-text>
    {_details_table([
        ("Cheque Number", number),
        ("Amount", f"<strong>{format_amount(amount)}</strong>"),
        ("Payer Name", escape(payer_name or "N/A")),
        ("Expected Clear Date", format_display_date(expected_clear_date)),
        ("Days Remaining", f'<span style="color: {days_style}; font-weight: 700;">{pluralize_days(days_remaining)}</span>'),
    ])}
    <mj-text font-size="14px" color="{THEME['text_muted']}">
      <strong>Important:</strong> Please update the cheque status once the payment is cleared.
    </mj-text>
    """

    return get_base_template(
        title=f"💳 Payment Reminder: Cheque {number}",
        preview_text=f"Cheque {number} for {format_amount(amount)} is due in {pluralize_days(days_remaining)}",
        content_sections=content,
        cta_url=cheque_url(cheque_id),
        cta_label="Update Status",
    )


def bounce_alert_template(
    cheque_id: int,
    cheque_number: str,
    amount: float,
    payer_name: Optional[str],
    expected_clear_date: Optional[date],
    bounce_date: Optional[date] = None,
) -> str:
    """Bounced cheque alert MJML template"""
    number = escape(cheque_number)

    rows = [
        ("Cheque Number", number),
        ("Amount", format_amount(amount)),
        ("Payer Name", escape(payer_name or "N/A")),
        ("Expected Clear Date", format_display_date(expected_clear_date)),
    ]
    if bounce_date:
        rows.append(("Bounced On", format_display_date(bounce_date)))
    rows.append(("Status", "BOUNCED"))

    content = f"""
    <mj-text color="{THEME['danger']}" padding="0 0 16px 0">
      <strong>Immediate action required!</strong> The following cheque has bounced.
    </mj-text>
    {_details_table(rows, highlight="Status")}
    <mj-text font-size="14px" color="{THEME['text_muted']}">
      <strong>Recommended Actions:</strong><br/>
      • Contact the payer immediately<br/>
      • Arrange for alternative payment<br/>
      • Update the cheque status with relevant notes
    </mj-text>
    """

    return get_base_template(
        title=f"⚠️ Cheque Bounced: {number}",
        preview_text=f"Cheque {number} from {escape(payer_name or 'N/A')} has bounced",
        content_sections=content,
        cta_url=cheque_url(cheque_id),
        cta_label="Take Action",
        accent=THEME["danger"],
    )


def overdue_alert_template(
    cheque_id: int,
    cheque_number: str,
    amount: float,
    payer_name: Optional[str],
    expected_clear_date: Optional[date],
    days_overdue: int,
) -> str:
    """Overdue payment alert MJML template"""
    number = escape(cheque_number)

    content = f"""
    <mj-text color="{THEME['danger']}" font-weight="700" padding="0 0 16px 0">
      IMMEDIATE ATTENTION REQUIRED!
    </mj-text>
    {_details_table([
        ("Cheque Number", number),
        ("Amount", format_amount(amount)),
        ("Payer Name", escape(payer_name or "N/A")),
        ("Was Due On", format_display_date(expected_clear_date)),
        ("Days Overdue", pluralize_days(days_overdue)),
    ], highlight="Days Overdue")}
    <mj-text font-size="14px" color="{THEME['text_muted']}">
      <strong>Recommended immediate actions:</strong><br/>
      • Contact the payer immediately via phone and email<br/>
      • Request immediate payment or replacement cheque<br/>
      • Consider alternative payment methods<br/>
      • Document all communication attempts
    </mj-text>
    """

    return get_base_template(
        title="🔴 URGENT: Overdue Payment",
        preview_text=f"Cheque {number} is {pluralize_days(days_overdue)} overdue",
        content_sections=content,
        cta_url=cheque_url(cheque_id),
        cta_label="Take Immediate Action",
        accent=THEME["danger"],
    )
