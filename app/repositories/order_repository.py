"""
Order Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc, update

from app.models.order import Order, OrderStatus, PaymentState


class OrderRepository:
    """Repository for Order persistence and conditional state updates"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID"""
        return self.db.query(Order).filter(Order.id == order_id).first()
    
    def refresh(self, order: Order) -> Order:
        """Re-read an order from the database"""
        self.db.refresh(order)
        return order
    
    def _user_query(self, user_id: str, order_status: Optional[str] = None):
        query = self.db.query(Order).filter(Order.user_id == user_id)
        if order_status:
            query = query.filter(Order.order_status == order_status)
        return query
    
    def get_by_user(
        self,
        user_id: str,
        order_status: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Order]:
        """Get a user's orders, newest first"""
        return self._user_query(user_id, order_status).order_by(
            desc(Order.created_at), desc(Order.id)
        ).offset(skip).limit(limit).all()
    
    def count_by_user(self, user_id: str, order_status: Optional[str] = None) -> int:
        """Count a user's orders"""
        return self._user_query(user_id, order_status).count()
    
    def create(self, order_data: dict) -> Order:
        """
        Create new order
        
        Args:
            order_data: Dictionary with order fields
        
        Returns:
            Created order
        """
        order = Order(**order_data)
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order
    
    def confirm_if_unpaid(self, order_id: int) -> bool:
        """
        Set Completed/Confirmed only if the order is still Pending and not yet paid
        
        Single UPDATE, so two concurrent callers cannot both win.
        Not committed here: the caller commits it together with the
        stock decrement.
        
        Returns:
            True if this call performed the transition
        """
        result = self.db.execute(
            update(Order)
            .where(
                Order.id == order_id,
                Order.payment_status != PaymentState.COMPLETED.value,
                Order.order_status == OrderStatus.PENDING.value
            )
            .values(
                payment_status=PaymentState.COMPLETED.value,
                order_status=OrderStatus.CONFIRMED.value
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
    
    def mark_failed_if_unpaid(self, order_id: int) -> bool:
        """Set paymentStatus=Failed unless the order is already Completed"""
        result = self.db.execute(
            update(Order)
            .where(
                Order.id == order_id,
                Order.payment_status != PaymentState.COMPLETED.value
            )
            .values(payment_status=PaymentState.FAILED.value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1
    
    def transition_status(self, order_id: int, from_status: str, to_status: str) -> bool:
        """
        Move orderStatus from from_status to to_status atomically
        
        Returns:
            True if the order was in from_status and has been updated
        """
        result = self.db.execute(
            update(Order)
            .where(Order.id == order_id, Order.order_status == from_status)
            .values(order_status=to_status)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1
