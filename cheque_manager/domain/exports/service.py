"""Export service - CSV reports for cheques and cash"""

import csv
import logging
from datetime import date, datetime, time
from io import StringIO
from typing import Optional

from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...errors import AppError
from ...shared.dates import days_until, local_today, month_bounds
from ...shared.validators import parse_month
from ..cash.repository import CashRepository
from ..cheques.repository import ChequeRepository
from ..dashboard.repository import DashboardRepository

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv",)


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _csv_response(header: list[str], rows: list[list], filename: str) -> StreamingResponse:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(value) for value in row])
    output.seek(0)

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


class ExportService:
    """Builds downloadable CSV reports"""

    def __init__(self, db: Session):
        self.db = db
        self.dashboard_repo = DashboardRepository()

    @staticmethod
    def check_format(export_format: Optional[str]) -> None:
        if export_format not in SUPPORTED_FORMATS:
            raise AppError(400, "Only CSV format is supported", "UNSUPPORTED_FORMAT")

    @staticmethod
    def _month_range(month: Optional[str]) -> Optional[tuple[date, date]]:
        if not month:
            return None
        try:
            return month_bounds(*parse_month(month))
        except ValueError as e:
            raise AppError(400, str(e), "INVALID_MONTH_FORMAT") from e

    def export_all_cheques(self, today: Optional[date] = None) -> StreamingResponse:
        today = today or local_today()
        cheques = self.dashboard_repo.all_cheques(self.db)
        logger.info(f"📊 Exporting {len(cheques)} cheques")

        rows = [
            [
                c.cheque_number,
                c.amount,
                c.payer_name,
                c.cheque_date,
                c.expected_clear_date,
                c.actual_clear_date,
                c.status,
                c.invoice_reference,
                c.notes,
            ]
            for c in cheques
        ]
        return _csv_response(
            [
                "Cheque Number",
                "Amount",
                "Payer Name",
                "Cheque Date",
                "Expected Clear Date",
                "Actual Clear Date",
                "Status",
                "Invoice Reference",
                "Notes",
            ],
            rows,
            f"cheques_{today.isoformat()}.csv",
        )

    def export_cash_records(
        self, month: Optional[str] = None, today: Optional[date] = None
    ) -> StreamingResponse:
        today = today or local_today()
        month_range = self._month_range(month)

        if month_range:
            records = CashRepository.get_records_between(self.db, *month_range)
            records.reverse()
            filename = f"cash_records_{month}_{today.isoformat()}.csv"
        else:
            records = CashRepository.all_records(self.db)
            filename = f"cash_records_all_{today.isoformat()}.csv"
        logger.info(f"📊 Exporting {len(records)} cash records ({month or 'all time'})")

        rows = [
            [r.date, r.amount, r.reference_person, r.purpose, r.invoice_reference, r.notes]
            for r in records
        ]
        return _csv_response(
            ["Date", "Amount", "Reference Person", "Purpose", "Invoice Reference", "Notes"],
            rows,
            filename,
        )

    def export_pending_cheques(self, today: Optional[date] = None) -> StreamingResponse:
        today = today or local_today()
        cheques = ChequeRepository.get_pending_cheques(self.db)

        rows = [
            [
                c.cheque_number,
                c.amount,
                c.payer_name,
                c.cheque_date,
                c.expected_clear_date,
                days_until(c.expected_clear_date, today) if c.expected_clear_date else "",
                c.invoice_reference,
                c.notes,
            ]
            for c in cheques
        ]
        return _csv_response(
            [
                "Cheque Number",
                "Amount",
                "Payer Name",
                "Cheque Date",
                "Expected Clear Date",
                "Days Until Clear",
                "Invoice Reference",
                "Notes",
            ],
            rows,
            f"pending_cheques_{today.isoformat()}.csv",
        )

    def summary_metrics(self, month: Optional[str] = None) -> list[tuple[str, float]]:
        """
        Metric/value pairs for the summary report.

        The month narrows cheque totals (by recording date) and cash totals
        (by receipt date); the per-status counts always cover every cheque.
        """
        month_range = self._month_range(month)

        if month_range:
            start, end = month_range
            cheques = self.dashboard_repo.cheques_created_between(
                self.db, datetime.combine(start, time.min), datetime.combine(end, time.min)
            )
            cash_records = CashRepository.get_records_between(self.db, start, end)
        else:
            cheques = self.dashboard_repo.all_cheques(self.db)
            cash_records = CashRepository.all_records(self.db)

        by_status = self.dashboard_repo.cheque_totals_by_status(self.db)

        return [
            ("Total Cheques", len(cheques)),
            ("Total Cheques Amount", sum(c.amount for c in cheques)),
            ("Pending Cheques", by_status.get("pending", (0, 0.0))[0]),
            ("Cleared Cheques", by_status.get("cleared", (0, 0.0))[0]),
            ("Bounced Cheques", by_status.get("bounced", (0, 0.0))[0]),
            ("Total Cash Records", len(cash_records)),
            ("Total Cash Amount", sum(r.amount for r in cash_records)),
        ]

    def export_summary_report(
        self, month: Optional[str] = None, today: Optional[date] = None
    ) -> StreamingResponse:
        today = today or local_today()
        metrics = self.summary_metrics(month)

        rows = [
            ["Month Filter", month or "All Time", ""],
            [],
            ["Metric", "Value", "Additional Info"],
        ]
        rows.extend([metric, value, ""] for metric, value in metrics)

        filename = (
            f"summary_report_{month}_{today.isoformat()}.csv"
            if month
            else f"summary_report_{today.isoformat()}.csv"
        )
        return _csv_response(["Report Generated", today.isoformat(), ""], rows, filename)
