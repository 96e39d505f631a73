"""Cheque repository - Database operations for cheques"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Cheque


class ChequeRepository:
    """Repository for cheque database operations"""

    @staticmethod
    def get_cheque_by_id(db: Session, cheque_id: int) -> Optional[Cheque]:
        return db.query(Cheque).filter(Cheque.id == cheque_id).first()

    @staticmethod
    def get_cheque_by_number(db: Session, cheque_number: str) -> Optional[Cheque]:
        return db.query(Cheque).filter(Cheque.cheque_number == cheque_number).first()

    @staticmethod
    def list_cheques(
        db: Session, status: Optional[str] = None, offset: int = 0, limit: int = 10
    ) -> tuple[list[Cheque], int]:
        """Newest-first page of cheques plus the total matching count"""
        query = db.query(Cheque)
        if status:
            query = query.filter(Cheque.status == status)

        total = query.with_entities(func.count(Cheque.id)).scalar() or 0
        cheques = (
            query.order_by(Cheque.created_at.desc(), Cheque.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return cheques, total

    @staticmethod
    def get_cheques_due_between(db: Session, start: date, end: date) -> list[Cheque]:
        """Cheques whose expected clear date falls in [start, end)"""
        return (
            db.query(Cheque)
            .filter(Cheque.expected_clear_date >= start, Cheque.expected_clear_date < end)
            .order_by(Cheque.expected_clear_date.asc(), Cheque.id.asc())
            .all()
        )

    @staticmethod
    def get_pending_cheques(db: Session) -> list[Cheque]:
        return (
            db.query(Cheque)
            .filter(Cheque.status == "pending")
            .order_by(Cheque.expected_clear_date.asc(), Cheque.id.asc())
            .all()
        )

    @staticmethod
    def create_cheque(db: Session, **cheque_data) -> Cheque:
        cheque = Cheque(**cheque_data)
        db.add(cheque)
        db.commit()
        db.refresh(cheque)
        return cheque

    @staticmethod
    def update_cheque(db: Session, cheque: Cheque, **updates) -> Cheque:
        """Update a cheque with provided fields"""
        for key, value in updates.items():
            if hasattr(cheque, key):
                setattr(cheque, key, value)

        db.commit()
        db.refresh(cheque)
        return cheque

    @staticmethod
    def delete_cheque(db: Session, cheque: Cheque) -> None:
        db.delete(cheque)
        db.commit()
