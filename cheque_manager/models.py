from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Statuses a user can set by hand; "paid" is only reached through the payment gateway
CHEQUE_STATUSES = ("pending", "deposited", "cleared", "bounced")
CHEQUE_STATUSES_ALL = CHEQUE_STATUSES + ("paid",)
PAYMENT_ORDER_STATUSES = ("created", "paid", "failed")
REMINDER_KINDS = ("reminder", "overdue", "bounce")


def _in_list(column: str, values: tuple) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class Cheque(Base):
    __tablename__ = "cheques"
    __table_args__ = (
        CheckConstraint(_in_list("status", CHEQUE_STATUSES_ALL), name="ck_cheques_status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    cheque_number = Column(String(50), unique=True, index=True, nullable=False)
    amount = Column(Float, nullable=False)
    payer_name = Column(String(255), nullable=False, index=True)
    cheque_date = Column(Date, nullable=False)
    expected_clear_date = Column(Date, nullable=True, index=True)
    # Clearance date for cleared/paid cheques, bounce date for bounced ones
    actual_clear_date = Column(Date, nullable=True)
    status = Column(String(20), default="pending", nullable=False, index=True)
    invoice_reference = Column(String(100), nullable=True, index=True)
    notes = Column(Text, nullable=True)
    payment_id = Column(String(100), nullable=True)  # Gateway payment ID when settled online

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    payment_orders = relationship("PaymentOrder", back_populates="cheque")
    reminder_logs = relationship(
        "ReminderLog", back_populates="cheque", cascade="all, delete-orphan"
    )


class CashRecord(Base):
    __tablename__ = "cash_records"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    reference_person = Column(String(255), nullable=True, index=True)
    purpose = Column(String(255), nullable=True)
    invoice_reference = Column(String(100), nullable=True, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())


class PaymentOrder(Base):
    """Payment gateway order, optionally settling a cheque"""

    __tablename__ = "payment_orders"
    __table_args__ = (
        CheckConstraint(
            _in_list("status", PAYMENT_ORDER_STATUSES), name="ck_payment_orders_status"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(100), unique=True, index=True, nullable=False)
    amount = Column(Integer, nullable=False)  # Minor units (paise)
    currency = Column(String(10), default="INR", nullable=False)
    status = Column(String(20), default="created", nullable=False)
    invoice_reference = Column(String(100), nullable=True)
    cheque_id = Column(Integer, ForeignKey("cheques.id", ondelete="SET NULL"), nullable=True)
    payment_id = Column(String(100), nullable=True)
    customer_data = Column(JSON, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    cheque = relationship("Cheque", back_populates="payment_orders")


class UserSettings(Base):
    """Single-row store for the account owner's profile and notification preferences"""

    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), default="", nullable=False)
    name = Column(String(255), default="", nullable=False)
    phone = Column(String(50), default="", nullable=False)
    company_name = Column(String(255), default="", nullable=False)
    default_currency = Column(String(10), default="INR", nullable=False)
    email_notifications = Column(Boolean, default=True, nullable=False)
    sms_notifications = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class ReminderLog(Base):
    """One row per notification e-mail sent for a cheque on a given day"""

    __tablename__ = "reminder_logs"
    __table_args__ = (
        UniqueConstraint("cheque_id", "kind", "sent_on", name="uq_reminder_logs_cheque_kind_day"),
        CheckConstraint(_in_list("kind", REMINDER_KINDS), name="ck_reminder_logs_kind"),
    )

    id = Column(Integer, primary_key=True, index=True)
    cheque_id = Column(Integer, ForeignKey("cheques.id", ondelete="CASCADE"), nullable=False)
    kind = Column(String(20), nullable=False)
    sent_on = Column(Date, nullable=False)
    recipient = Column(String(255), nullable=False)
    message_id = Column(String(255), nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    cheque = relationship("Cheque", back_populates="reminder_logs")


class ReminderRun(Base):
    """Summary of one pass of the reminder job"""

    __tablename__ = "reminder_runs"

    id = Column(Integer, primary_key=True, index=True)
    trigger = Column(String(20), nullable=False)  # scheduled, startup, manual
    run_date = Column(Date, nullable=False)
    started_at = Column(DateTime, nullable=False)
    finished_at = Column(DateTime, nullable=True)
    pending_checked = Column(Integer, default=0, nullable=False)
    reminders_sent = Column(Integer, default=0, nullable=False)
    overdue_alerts_sent = Column(Integer, default=0, nullable=False)
    skipped = Column(Integer, default=0, nullable=False)
    errors = Column(Integer, default=0, nullable=False)
    error_message = Column(Text, nullable=True)
