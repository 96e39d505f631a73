"""Cheque service - Business logic for cheque operations"""

import logging
import math
from collections import defaultdict
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import AppError, NotFoundError, ValidationError
from ...models import CHEQUE_STATUSES, Cheque
from ...shared.dates import days_until, local_today, month_bounds
from ...shared.validators import parse_month
from .repository import ChequeRepository
from .schemas import CalendarEntry, ChequeCreate, ChequeResponse, ChequeUpdate

logger = logging.getLogger(__name__)


def status_side_effects(new_status: str, today: date) -> dict:
    """
    Column changes that accompany a status change.

    actual_clear_date doubles as the bounce date, so it is stamped for both
    terminal outcomes and cleared again if the cheque goes back in play.
    """
    if new_status in ("cleared", "bounced"):
        return {"status": new_status, "actual_clear_date": today}
    return {"status": new_status, "actual_clear_date": None}


class ChequeService:
    """Service layer for cheque business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ChequeRepository()

    def get_cheque(self, cheque_id: int) -> Cheque:
        cheque = self.repo.get_cheque_by_id(self.db, cheque_id)
        if not cheque:
            raise NotFoundError("Cheque not found")
        return cheque

    def list_cheques(self, status: Optional[str], page: int, limit: int) -> dict:
        if page < 1 or limit < 1:
            raise ValidationError("Invalid pagination parameters. Page and limit must be >= 1")

        cheques, total = self.repo.list_cheques(
            self.db, status=status or None, offset=(page - 1) * limit, limit=limit
        )
        return {
            "cheques": [ChequeResponse.model_validate(c) for c in cheques],
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        }

    def create_cheque(self, data: ChequeCreate) -> Cheque:
        if self.repo.get_cheque_by_number(self.db, data.cheque_number):
            raise AppError(400, "Cheque number already exists", "DUPLICATE_CHEQUE")

        cheque = self.repo.create_cheque(self.db, **data.model_dump(), status="pending")
        logger.info(f"📝 Cheque {cheque.cheque_number} recorded: {cheque.amount} from {cheque.payer_name}")
        return cheque

    def update_cheque(self, cheque_id: int, data: ChequeUpdate, today: Optional[date] = None) -> Cheque:
        cheque = self.get_cheque(cheque_id)

        updates = data.model_dump(exclude_unset=True)
        if not updates:
            raise AppError(400, "No changes made to the cheque", "NO_CHANGES")

        new_status = updates.pop("status", None)
        if new_status and new_status != cheque.status:
            updates.update(status_side_effects(new_status, today or local_today()))

        return self.repo.update_cheque(self.db, cheque, **updates)

    def update_status(
        self, cheque_id: int, status: Optional[str], today: Optional[date] = None
    ) -> tuple[Cheque, bool]:
        """
        Change a cheque's status.

        Returns the cheque and whether this call moved it into "bounced".
        """
        if not status or status not in CHEQUE_STATUSES:
            raise AppError(
                400,
                f"Invalid status. Must be one of: {', '.join(CHEQUE_STATUSES)}",
                "INVALID_STATUS",
            )

        cheque = self.get_cheque(cheque_id)
        previous = cheque.status
        if status == previous:
            return cheque, False

        cheque = self.repo.update_cheque(
            self.db, cheque, **status_side_effects(status, today or local_today())
        )
        logger.info(f"🔄 Cheque {cheque.cheque_number} status: {previous} → {status}")
        return cheque, status == "bounced"

    def delete_cheque(self, cheque_id: int) -> dict:
        cheque = self.get_cheque(cheque_id)
        self.repo.delete_cheque(self.db, cheque)
        logger.info(f"🗑️ Cheque {cheque_id} deleted")
        return {"message": "Cheque deleted successfully"}

    def get_calendar(self, month: Optional[str], today: Optional[date] = None) -> dict:
        """Cheques due in a month, grouped by expected clear date"""
        today = today or local_today()
        target_month = month or today.strftime("%Y-%m")

        try:
            year, month_number = parse_month(target_month)
        except ValueError as e:
            raise AppError(400, str(e), "INVALID_MONTH_FORMAT") from e

        start, end = month_bounds(year, month_number)
        cheques = self.repo.get_cheques_due_between(self.db, start, end)

        calendar: dict[str, list[CalendarEntry]] = defaultdict(list)
        for cheque in cheques:
            calendar[cheque.expected_clear_date.isoformat()].append(
                CalendarEntry(
                    id=cheque.id,
                    cheque_number=cheque.cheque_number,
                    amount=cheque.amount,
                    payer_name=cheque.payer_name,
                    expected_clear_date=cheque.expected_clear_date,
                    status=cheque.status,
                    daysUntilDue=days_until(cheque.expected_clear_date, today),
                    invoice_reference=cheque.invoice_reference,
                    notes=cheque.notes,
                )
            )

        return {
            "data": dict(calendar),
            "month": target_month,
            "totalCheques": len(cheques),
            "error": None,
        }
