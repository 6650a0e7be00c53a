"""
SQLAlchemy Payment model
"""
import enum

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from app.database import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"


class Payment(Base):
    """One payment attempt against the payment provider"""
    
    __tablename__ = "payments"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    payment_id = Column(String(128), nullable=False, unique=True, index=True)  # provider id
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    __table_args__ = (
        CheckConstraint("status IN ('Pending', 'Success', 'Failed')", name='check_payment_record_status_valid'),
    )
    
    def __repr__(self):
        return f"<Payment(id={self.id}, payment_id='{self.payment_id}', order_id={self.order_id}, status='{self.status}')>"
