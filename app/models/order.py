"""
SQLAlchemy Order model
"""
import enum

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.types import FixedPointText


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentState(str, enum.Enum):
    """Payment status as tracked on the order"""
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


class Order(Base):
    """Order database model"""
    
    __tablename__ = "orders"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    size_selected = Column(String(32), nullable=False)
    quantity = Column(Integer, nullable=False)
    address = Column(JSON, nullable=False)
    customer_email = Column(String(255), nullable=True)
    amount_paid = Column(FixedPointText, nullable=False)
    original_amount = Column(FixedPointText, nullable=False)
    discount_amount = Column(FixedPointText, nullable=False)
    discount_percentage = Column(Float, nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default=PaymentState.PENDING.value, index=True)
    order_status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    product = relationship("Product", lazy="joined")
    
    # Constraints
    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        CheckConstraint('discount_percentage >= 0 AND discount_percentage <= 100', name='check_discount_percentage_range'),
        CheckConstraint(
            "order_status IN ('Pending', 'Confirmed', 'Shipped', 'Delivered', 'Cancelled')",
            name='check_order_status_valid'
        ),
        CheckConstraint(
            "payment_status IN ('Pending', 'Completed', 'Failed')",
            name='check_payment_status_valid'
        ),
        Index('ix_orders_user_product', 'user_id', 'product_id'),
    )
    
    def __repr__(self):
        return (
            f"<Order(id={self.id}, product_id={self.product_id}, quantity={self.quantity}, "
            f"order_status='{self.order_status}', payment_status='{self.payment_status}')>"
        )
