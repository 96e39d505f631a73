"""Dashboard repository - Aggregate queries across cheques and cash"""

from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import CashRecord, Cheque


class DashboardRepository:
    """Read-only aggregate queries used by the dashboard and analytics views"""

    @staticmethod
    def cheque_totals_by_status(db: Session) -> dict[str, tuple[int, float]]:
        """{status: (count, amount)} for every status present"""
        rows = (
            db.query(
                Cheque.status,
                func.count(Cheque.id),
                func.coalesce(func.sum(Cheque.amount), 0),
            )
            .group_by(Cheque.status)
            .all()
        )
        return {status: (count or 0, float(amount or 0)) for status, count, amount in rows}

    @staticmethod
    def count_overdue(db: Session, today: date) -> int:
        return (
            db.query(func.count(Cheque.id))
            .filter(Cheque.status == "pending", Cheque.expected_clear_date < today)
            .scalar()
            or 0
        )

    @staticmethod
    def cash_between(db: Session, start: date, end: date) -> tuple[float, int]:
        """(amount, entries) for cash dated in [start, end)"""
        amount, count = (
            db.query(func.coalesce(func.sum(CashRecord.amount), 0), func.count(CashRecord.id))
            .filter(CashRecord.date >= start, CashRecord.date < end)
            .one()
        )
        return float(amount or 0), count or 0

    @staticmethod
    def total_cash(db: Session) -> float:
        return float(db.query(func.coalesce(func.sum(CashRecord.amount), 0)).scalar() or 0)

    @staticmethod
    def pending_cheques(db: Session, limit: int = 20) -> list[Cheque]:
        return (
            db.query(Cheque)
            .filter(Cheque.status == "pending")
            .order_by(Cheque.expected_clear_date.is_(None), Cheque.expected_clear_date.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def bounced_cheques(db: Session) -> list[Cheque]:
        return (
            db.query(Cheque)
            .filter(Cheque.status == "bounced")
            .order_by(Cheque.actual_clear_date.desc(), Cheque.created_at.desc())
            .all()
        )

    @staticmethod
    def cheques_for_invoice(
        db: Session, invoice_reference: str, statuses: Iterable[str]
    ) -> tuple[float, int]:
        amount, count = (
            db.query(func.coalesce(func.sum(Cheque.amount), 0), func.count(Cheque.id))
            .filter(Cheque.invoice_reference == invoice_reference, Cheque.status.in_(list(statuses)))
            .one()
        )
        return float(amount or 0), count or 0

    @staticmethod
    def cash_for_invoice(db: Session, invoice_reference: str) -> tuple[float, int]:
        amount, count = (
            db.query(func.coalesce(func.sum(CashRecord.amount), 0), func.count(CashRecord.id))
            .filter(CashRecord.invoice_reference == invoice_reference)
            .one()
        )
        return float(amount or 0), count or 0

    @staticmethod
    def cheques_created_between(db: Session, start: datetime, end: datetime) -> list[Cheque]:
        return (
            db.query(Cheque)
            .filter(Cheque.created_at >= start, Cheque.created_at < end)
            .all()
        )

    @staticmethod
    def cheques_expected_since(db: Session, since: date) -> list[Cheque]:
        return (
            db.query(Cheque)
            .filter(Cheque.expected_clear_date >= since)
            .order_by(Cheque.expected_clear_date.asc())
            .all()
        )

    @staticmethod
    def top_payers(db: Session, limit: int) -> list[tuple[str, float, int]]:
        total_amount = func.coalesce(func.sum(Cheque.amount), 0).label("total_amount")
        rows = (
            db.query(Cheque.payer_name, total_amount, func.count(Cheque.id))
            .filter(Cheque.payer_name.isnot(None), Cheque.payer_name != "")
            .group_by(Cheque.payer_name)
            .order_by(total_amount.desc())
            .limit(limit)
            .all()
        )
        return [(name, float(amount or 0), count) for name, amount, count in rows]

    @staticmethod
    def cleared_cheque_dates(db: Session) -> list[tuple[date, date]]:
        """(cheque_date, actual_clear_date) pairs for cleared cheques"""
        return (
            db.query(Cheque.cheque_date, Cheque.actual_clear_date)
            .filter(
                Cheque.status == "cleared",
                Cheque.actual_clear_date.isnot(None),
                Cheque.cheque_date.isnot(None),
            )
            .all()
        )

    @staticmethod
    def all_cheques(db: Session, status: Optional[str] = None) -> list[Cheque]:
        query = db.query(Cheque)
        if status:
            query = query.filter(Cheque.status == status)
        return query.order_by(Cheque.created_at.desc(), Cheque.id.desc()).all()
