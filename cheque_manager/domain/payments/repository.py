"""Payment repository - Database operations for payment orders"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import PaymentOrder


class PaymentRepository:
    """Repository for payment order database operations"""

    @staticmethod
    def get_order(db: Session, order_id: str) -> Optional[PaymentOrder]:
        return (
            db.query(PaymentOrder)
            .options(joinedload(PaymentOrder.cheque))
            .filter(PaymentOrder.order_id == order_id)
            .first()
        )

    @staticmethod
    def list_orders(
        db: Session, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[PaymentOrder]:
        query = db.query(PaymentOrder).options(joinedload(PaymentOrder.cheque))
        if status:
            query = query.filter(PaymentOrder.status == status)
        return (
            query.order_by(PaymentOrder.created_at.desc(), PaymentOrder.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def create_order(db: Session, **order_data) -> PaymentOrder:
        order = PaymentOrder(**order_data)
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def update_order_status(
        db: Session, order: PaymentOrder, status: str, payment_id: Optional[str] = None
    ) -> PaymentOrder:
        order.status = status
        if payment_id:
            order.payment_id = payment_id
        db.commit()
        db.refresh(order)
        return order
