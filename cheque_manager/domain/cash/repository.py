"""Cash repository - Database operations for cash records"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import CashRecord


class CashRepository:
    """Repository for cash record database operations"""

    @staticmethod
    def _filtered(
        db: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_person: Optional[str] = None,
    ):
        query = db.query(CashRecord)
        # Range only applies when both ends are given
        if start_date and end_date:
            query = query.filter(CashRecord.date >= start_date, CashRecord.date <= end_date)
        if reference_person:
            query = query.filter(CashRecord.reference_person.ilike(f"%{reference_person}%"))
        return query

    @staticmethod
    def get_record_by_id(db: Session, record_id: int) -> Optional[CashRecord]:
        return db.query(CashRecord).filter(CashRecord.id == record_id).first()

    @classmethod
    def list_records(
        cls,
        db: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_person: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[CashRecord], int]:
        """Page of records, newest receipt first, with the matching count"""
        query = cls._filtered(db, start_date, end_date, reference_person)
        total = query.with_entities(func.count(CashRecord.id)).scalar()
        records = (
            query.order_by(CashRecord.date.desc(), CashRecord.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return records, total or 0

    @staticmethod
    def all_records(db: Session) -> list[CashRecord]:
        return db.query(CashRecord).order_by(CashRecord.date.desc(), CashRecord.id.desc()).all()

    @staticmethod
    def get_records_between(db: Session, start: date, end: date) -> list[CashRecord]:
        """Records dated in [start, end)"""
        return (
            db.query(CashRecord)
            .filter(CashRecord.date >= start, CashRecord.date < end)
            .order_by(CashRecord.date.asc(), CashRecord.id.asc())
            .all()
        )

    @staticmethod
    def sum_amount(
        db: Session, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> float:
        """Total cash received, inclusive of both bounds when given"""
        query = db.query(func.coalesce(func.sum(CashRecord.amount), 0))
        if start_date:
            query = query.filter(CashRecord.date >= start_date)
        if end_date:
            query = query.filter(CashRecord.date <= end_date)
        return float(query.scalar() or 0)

    @staticmethod
    def create_record(db: Session, **record_data) -> CashRecord:
        record = CashRecord(**record_data)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def update_record(db: Session, record: CashRecord, **updates) -> CashRecord:
        for key, value in updates.items():
            if hasattr(record, key):
                setattr(record, key, value)

        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def delete_record(db: Session, record: CashRecord) -> None:
        db.delete(record)
        db.commit()
