"""Cash service - Business logic for cash receipts"""

import logging
import math
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import AppError, NotFoundError, ValidationError
from ...models import CashRecord
from .repository import CashRepository
from .schemas import CashRecordCreate, CashRecordResponse, CashRecordUpdate

logger = logging.getLogger(__name__)


class CashService:
    """Service layer for cash record business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CashRepository()

    def get_record(self, record_id: int) -> CashRecord:
        record = self.repo.get_record_by_id(self.db, record_id)
        if not record:
            raise NotFoundError("Cash record not found")
        return record

    def list_records(
        self,
        page: int,
        limit: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_person: Optional[str] = None,
    ) -> dict:
        """
        Paginated cash records.

        totalAmount covers the date range when both bounds are given and every
        record otherwise; the reference_person filter narrows the page only.
        """
        if page < 1 or limit < 1 or limit > 100:
            raise ValidationError(
                "Invalid pagination parameters. Page must be >= 1, limit must be between 1 and 100"
            )

        records, total = self.repo.list_records(
            self.db,
            start_date=start_date,
            end_date=end_date,
            reference_person=reference_person or None,
            offset=(page - 1) * limit,
            limit=limit,
        )
        if start_date and end_date:
            total_amount = self.repo.sum_amount(self.db, start_date, end_date)
        else:
            total_amount = self.repo.sum_amount(self.db)

        return {
            "records": [CashRecordResponse.model_validate(r) for r in records],
            "total": total,
            "totalAmount": total_amount,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        }

    def get_total(self, start_date: Optional[date], end_date: Optional[date]) -> float:
        if start_date and end_date:
            return self.repo.sum_amount(self.db, start_date, end_date)
        return self.repo.sum_amount(self.db)

    def create_record(self, data: CashRecordCreate) -> CashRecord:
        record = self.repo.create_record(self.db, **data.model_dump())
        logger.info(f"💵 Cash receipt of {record.amount} recorded for {record.date}")
        return record

    def update_record(self, record_id: int, data: CashRecordUpdate) -> CashRecord:
        record = self.get_record(record_id)
        updates = data.model_dump(exclude_unset=True)
        if not updates:
            raise AppError(400, "No changes made to the cash record", "NO_CHANGES")
        return self.repo.update_record(self.db, record, **updates)

    def delete_record(self, record_id: int) -> dict:
        record = self.get_record(record_id)
        self.repo.delete_record(self.db, record)
        logger.info(f"🗑️ Cash record {record_id} deleted")
        return {"message": "Cash record deleted successfully"}
