"""
Payment Repository - Data Access Layer
"""
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc, update

from app.models.payment import Payment, PaymentStatus


class PaymentRepository:
    """Repository for Payment records"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_payment_id(self, payment_id: str) -> Optional[Payment]:
        """Get payment by provider payment id"""
        return self.db.query(Payment).filter(Payment.payment_id == payment_id).first()
    
    def get_latest_for_order(self, order_id: int, user_id: Optional[str] = None) -> Optional[Payment]:
        """Most recent payment attempt for an order"""
        query = self.db.query(Payment).filter(Payment.order_id == order_id)
        if user_id is not None:
            query = query.filter(Payment.user_id == user_id)
        return query.order_by(desc(Payment.created_at), desc(Payment.id)).first()
    
    def create(self, payment_data: dict) -> Payment:
        """Create new payment record"""
        payment = Payment(**payment_data)
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment
    
    def mark_failed_unless_succeeded(self, payment_id: str) -> bool:
        """
        Set status=Failed unless the record already says Success
        
        Returns:
            True if the record was updated
        """
        result = self.db.execute(
            update(Payment)
            .where(
                Payment.payment_id == payment_id,
                Payment.status != PaymentStatus.SUCCESS.value
            )
            .values(status=PaymentStatus.FAILED.value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1
