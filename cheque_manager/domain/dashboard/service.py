"""Dashboard service - Summaries and analytics over cheques and cash"""

import logging
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import ValidationError
from ...shared.dates import day_after, days_until, local_today, month_bounds, months_ago, year_bounds
from ..cash.repository import CashRepository
from .repository import DashboardRepository

logger = logging.getLogger(__name__)

RECEIVED_CHEQUE_STATUSES = ("cleared", "deposited")


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min)


class DashboardService:
    """Service layer for dashboard and analytics figures"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DashboardRepository()

    def get_summary(self, today: Optional[date] = None) -> dict:
        today = today or local_today()
        by_status = self.repo.cheque_totals_by_status(self.db)

        def bucket(status: str) -> dict:
            count, amount = by_status.get(status, (0, 0.0))
            return {"count": count, "totalAmount": amount}

        cash_today, _ = self.repo.cash_between(self.db, today, day_after(today))
        month_start, next_month = month_bounds(today.year, today.month)
        cash_this_month, _ = self.repo.cash_between(self.db, month_start, next_month)

        return {
            "pendingCheques": bucket("pending"),
            "clearedCheques": bucket("cleared"),
            "bouncedCheques": bucket("bounced"),
            "cashToday": cash_today,
            "cashThisMonth": cash_this_month,
            "overdueCheques": self.repo.count_overdue(self.db, today),
        }

    def get_pending_cheques(self, today: Optional[date] = None) -> list[dict]:
        """Up to 20 pending cheques, soonest expected date first"""
        today = today or local_today()
        return [
            {
                "id": c.id,
                "cheque_number": c.cheque_number,
                "amount": c.amount,
                "payer_name": c.payer_name,
                "expected_clear_date": c.expected_clear_date,
                "invoice_reference": c.invoice_reference,
                "notes": c.notes,
                "created_at": c.created_at,
                "updated_at": c.updated_at,
                "days_until_clear": (
                    days_until(c.expected_clear_date, today) if c.expected_clear_date else None
                ),
            }
            for c in self.repo.pending_cheques(self.db, limit=20)
        ]

    def get_bounced_cheques(self) -> list[dict]:
        return [
            {
                "id": c.id,
                "cheque_number": c.cheque_number,
                "amount": c.amount,
                "payer_name": c.payer_name,
                "cheque_date": c.cheque_date,
                "expected_clear_date": c.expected_clear_date,
                "bounce_date": c.actual_clear_date,
                "invoice_reference": c.invoice_reference,
                "notes": c.notes,
                "created_at": c.created_at,
                "updated_at": c.updated_at,
            }
            for c in self.repo.bounced_cheques(self.db)
        ]

    def get_cash_today(self, today: Optional[date] = None) -> dict:
        today = today or local_today()
        amount, entries = self.repo.cash_between(self.db, today, day_after(today))
        return {
            "total_cash_collected": amount,
            "number_of_entries": entries,
            "date": today.isoformat(),
        }

    def get_payment_status(self, invoice_id: Optional[str]) -> dict:
        """
        Money received against an invoice reference.

        Deposited cheques count as received alongside cleared ones. With no
        expected invoice total to compare against, any receipt marks the
        invoice complete.
        """
        if not invoice_id:
            raise ValidationError("invoice_id parameter is required")

        cheques_received, cheques_count = self.repo.cheques_for_invoice(
            self.db, invoice_id, RECEIVED_CHEQUE_STATUSES
        )
        cash_received, cash_count = self.repo.cash_for_invoice(self.db, invoice_id)
        total_received = cheques_received + cash_received

        return {
            "invoice_id": invoice_id,
            "cheques_received": cheques_received,
            "cheques_count": cheques_count,
            "cash_received": cash_received,
            "cash_count": cash_count,
            "total_received": total_received,
            "payment_status": "complete" if total_received > 0 else "pending",
        }

    def get_monthly_stats(self, year: Optional[int] = None) -> list[dict]:
        """
        Per-month activity for a calendar year.

        Cheques are bucketed by the month they were recorded, cash by its
        receipt date. Months with no activity at all are omitted.
        """
        year = year or local_today().year
        start, end = year_bounds(year)

        months: dict[str, dict] = {}

        def month_entry(key: str) -> dict:
            return months.setdefault(
                key,
                {"month": key, "cheque_count": 0, "cheque_amount": 0.0, "cash_count": 0, "cash_amount": 0.0},
            )

        for cheque in self.repo.cheques_created_between(self.db, _start_of(start), _start_of(end)):
            entry = month_entry(f"{cheque.created_at.month:02d}")
            entry["cheque_count"] += 1
            entry["cheque_amount"] += cheque.amount

        for record in CashRepository.get_records_between(self.db, start, end):
            entry = month_entry(f"{record.date.month:02d}")
            entry["cash_count"] += 1
            entry["cash_amount"] += record.amount

        return [months[key] for key in sorted(months)]

    def get_trends(self, months: int = 6, today: Optional[date] = None) -> dict:
        """Cleared and bounced totals per month of expected clear date"""
        today = today or local_today()
        since = months_ago(today, months if months > 0 else 6)

        buckets: dict[str, dict] = {}
        for cheque in self.repo.cheques_expected_since(self.db, since):
            key = cheque.expected_clear_date.strftime("%Y-%m")
            bucket = buckets.setdefault(
                key, {"cleared": 0.0, "bounced": 0.0, "bouncedCount": 0, "total": 0}
            )
            bucket["total"] += 1
            if cheque.status == "cleared":
                bucket["cleared"] += cheque.amount
            elif cheque.status == "bounced":
                bucket["bounced"] += cheque.amount
                bucket["bouncedCount"] += 1

        return {
            "months": list(buckets),
            "clearedAmount": [b["cleared"] for b in buckets.values()],
            "bouncedAmount": [b["bounced"] for b in buckets.values()],
            "bouncedCount": [b["bouncedCount"] for b in buckets.values()],
            "totalCheques": [b["total"] for b in buckets.values()],
        }

    def get_status_breakdown(self) -> dict:
        return {
            status: {"count": count, "amount": amount}
            for status, (count, amount) in self.repo.cheque_totals_by_status(self.db).items()
        }

    def get_top_payers(self, limit: int = 5) -> list[dict]:
        return [
            {"payer_name": name, "total_amount": amount, "cheque_count": count}
            for name, amount, count in self.repo.top_payers(self.db, limit if limit > 0 else 5)
        ]

    def get_key_metrics(self) -> dict:
        by_status = self.repo.cheque_totals_by_status(self.db)
        cleared_amount = by_status.get("cleared", (0, 0.0))[1]
        pending_count, pending_amount = by_status.get("pending", (0, 0.0))
        bounced_count, bounced_amount = by_status.get("bounced", (0, 0.0))

        total_collected = cleared_amount + self.repo.total_cash(self.db)
        total_expected = sum(amount for _, amount in by_status.values())
        collection_rate = (
            round(total_collected / total_expected * 100, 2) if total_expected > 0 else 0
        )

        clearance_days = [
            (cleared_on - written_on).days
            for written_on, cleared_on in self.repo.cleared_cheque_dates(self.db)
        ]
        average_clearance = (
            round(sum(clearance_days) / len(clearance_days)) if clearance_days else 0
        )

        return {
            "totalCollected": total_collected,
            "totalExpected": total_expected,
            "collectionRate": collection_rate,
            "averageClearanceDays": average_clearance,
            "bouncedCount": bounced_count,
            "pendingCount": pending_count,
            "pendingAmount": pending_amount,
            "bouncedAmount": bounced_amount,
        }
