"""
Order Service - Business Logic Layer

Owns the order state machine:

    Pending/Pending --payment success--> Confirmed/Completed --> Shipped --> Delivered
    Pending/Pending --user cancel------> Cancelled/Pending
    Pending/Pending --payment failure--> Pending/Failed (a later success still confirms)

Confirmation and the stock decrement are committed together, at most once
per order.
"""
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from app.models.order import Order, OrderStatus, PaymentState
from app.models.payment import Payment, PaymentStatus
from app.repositories.cart_repository import CartRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.schemas.order import (
    OrderCreate,
    OrderCreatedResponse,
    OrderListResponse,
    OrderResponse,
    PriceBreakdownResponse
)
from app.services.notification_service import NotificationService, notify_safely
from app.services.pricing import compute_price
from app.services.stock_ledger import StockLedger

logger = logging.getLogger(__name__)

# Admin transitions: target status -> required current status
ADMIN_TRANSITIONS = {
    OrderStatus.SHIPPED.value: OrderStatus.CONFIRMED.value,
    OrderStatus.DELIVERED.value: OrderStatus.SHIPPED.value,
}


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session, notifier: Optional[NotificationService] = None):
        self.db = db
        self.repository = OrderRepository(db)
        self.product_repository = ProductRepository(db)
        self.cart_repository = CartRepository(db)
        self.stock_ledger = StockLedger(db)
        self.notifier = notifier or NotificationService()

    def _get_owned_order(self, user_id: str, order_id: int) -> Order:
        order = self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if order.user_id != user_id:
            raise UnauthorizedError("You do not have access to this order")
        return order

    def get_order(self, user_id: str, order_id: int) -> OrderResponse:
        """Get an order owned by user_id"""
        return OrderResponse.model_validate(self._get_owned_order(user_id, order_id))

    def get_owned_order(self, user_id: str, order_id: int) -> Order:
        """ORM order owned by user_id (used by the payment flow)"""
        return self._get_owned_order(user_id, order_id)

    def list_user_orders(
        self,
        user_id: str,
        order_status: Optional[str] = None,
        page: int = 1,
        limit: int = 50
    ) -> OrderListResponse:
        """List a user's orders, optionally filtered by orderStatus"""
        skip = (page - 1) * limit
        orders = self.repository.get_by_user(user_id, order_status, skip=skip, limit=limit)
        total = self.repository.count_by_user(user_id, order_status)

        return OrderListResponse(
            orders=[OrderResponse.model_validate(o) for o in orders],
            total=total,
            page=page,
            limit=limit
        )

    def create_order(self, user_id: str, order_data: OrderCreate) -> OrderCreatedResponse:
        """
        Create new order

        Steps:
        1. Validate product, size and stock
        2. Price the order on the size's unit price
        3. Replace a client amount that disagrees with the computed one
        4. Save order as Pending/Pending
        5. Remove the cart line if the order came from the cart

        Raises:
            NotFoundError: If product not found
            ValidationError: If size is invalid or stock is insufficient
        """
        product = self.product_repository.get_by_id(order_data.product_id)
        if not product:
            raise NotFoundError("Product not found")

        size = product.find_size(order_data.size_selected)
        if not size:
            raise ValidationError("Invalid size selected")

        if not self.stock_ledger.check_available(product.id, order_data.quantity):
            raise ValidationError(f"Insufficient stock. Only {product.stock} items available.")

        pricing = compute_price(order_data.quantity, size.price)

        adjusted = False
        if order_data.amount is not None:
            difference = abs(order_data.amount - pricing.final_amount)
            if difference > Decimal(str(settings.AMOUNT_TOLERANCE)):
                adjusted = True
                logger.warning(
                    "Client amount %s for product %s x%s does not match computed %s; using computed amount",
                    order_data.amount, product.id, order_data.quantity, pricing.final_amount
                )

        order = self.repository.create({
            'user_id': user_id,
            'product_id': product.id,
            'size_selected': size.key,
            'quantity': order_data.quantity,
            'address': order_data.address.model_dump(),
            'customer_email': order_data.customer_email,
            'amount_paid': pricing.final_amount,
            'original_amount': pricing.original_amount,
            'discount_amount': pricing.discount_amount,
            'discount_percentage': float(pricing.discount_percentage),
            'payment_status': PaymentState.PENDING.value,
            'order_status': OrderStatus.PENDING.value
        })
        logger.info("Order %s created for user %s: amount %s", order.id, user_id, order.amount_paid)

        if order_data.from_cart and order_data.cart_item_id:
            self._remove_cart_line(user_id, order_data.cart_item_id)

        return OrderCreatedResponse(
            order_id=order.id,
            amount=pricing.final_amount,
            amount_adjusted=adjusted,
            pricing=PriceBreakdownResponse(**pricing.to_dict())
        )

    def _remove_cart_line(self, user_id: str, cart_item_id: int) -> None:
        # Best effort: the order already exists
        try:
            cart = self.cart_repository.get_by_user(user_id)
            if cart and not self.cart_repository.remove_item(cart, cart_item_id):
                logger.info("Cart item %s not found for user %s", cart_item_id, user_id)
        except Exception:
            self.db.rollback()
            logger.exception("Failed to remove cart item %s for user %s", cart_item_id, user_id)

    def cancel_order(self, user_id: str, order_id: int) -> OrderResponse:
        """
        Cancel an order (owner only, only while Pending)

        Raises:
            NotFoundError, UnauthorizedError, ConflictError
        """
        order = self._get_owned_order(user_id, order_id)

        cancelled = self.repository.transition_status(
            order_id, OrderStatus.PENDING.value, OrderStatus.CANCELLED.value
        )
        if not cancelled:
            raise ConflictError("Only pending orders can be cancelled")

        order = self.repository.refresh(order)
        logger.info("Order %s cancelled by user %s", order_id, user_id)
        self._notify_status_changed(order, OrderStatus.PENDING.value)
        return OrderResponse.model_validate(order)

    def update_order_status(self, order_id: int, new_status: str) -> OrderResponse:
        """
        Admin fulfilment transitions (Confirmed -> Shipped -> Delivered)

        Raises:
            NotFoundError: If order not found
            ConflictError: If the transition is not allowed from the current status
        """
        order = self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")

        required = ADMIN_TRANSITIONS.get(new_status)
        if required is None:
            raise ValidationError(f"Unsupported status: {new_status}")

        if not self.repository.transition_status(order_id, required, new_status):
            raise ConflictError(
                f"Cannot move order from {order.order_status} to {new_status}"
            )

        order = self.repository.refresh(order)
        logger.info("Order %s moved %s -> %s", order_id, required, new_status)
        self._notify_status_changed(order, required)
        return OrderResponse.model_validate(order)

    def confirm_payment(self, order_id: int, payment: Optional[Payment] = None) -> bool:
        """
        Apply a payment success to the order, at most once

        In one transaction: Pending/unpaid -> Confirmed/Completed, the
        payment record -> Success, stock -= quantity (floored at 0).

        Args:
            order_id: Order ID
            payment: Payment record that reported success

        Returns:
            True if this call confirmed the order, False if it was a no-op

        Raises:
            NotFoundError: If order not found
        """
        order = self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")
        product_id, quantity = order.product_id, order.quantity

        try:
            if not self.repository.confirm_if_unpaid(order_id):
                self.db.rollback()
                self._log_lost_confirmation(order)
                return False

            if payment is not None:
                payment.status = PaymentStatus.SUCCESS.value
            self.stock_ledger.decrement(product_id, quantity, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        order = self.repository.refresh(order)
        logger.info("Order %s confirmed, stock decremented by %s", order_id, quantity)
        notify_safely(self.notifier.send_order_confirmed, self._order_event(order))
        return True

    def _log_lost_confirmation(self, order: Order) -> None:
        order = self.repository.refresh(order)
        if order.payment_status == PaymentState.COMPLETED.value:
            logger.info("Order %s already completed; duplicate completion signal ignored", order.id)
        else:
            logger.error(
                "Payment succeeded for order %s in status %s; not confirmed, needs manual refund",
                order.id, order.order_status
            )

    def mark_payment_failed(self, order_id: int) -> bool:
        """Set paymentStatus=Failed unless already Completed; orderStatus is untouched"""
        updated = self.repository.mark_failed_if_unpaid(order_id)
        if updated:
            logger.info("Order %s payment failed", order_id)
        return updated

    def _order_event(self, order: Order) -> dict:
        return {
            'order_id': order.id,
            'product_name': order.product.name if order.product else '',
            'size_selected': order.size_selected,
            'quantity': order.quantity,
            'amount_paid': order.amount_paid,
            'customer_email': order.customer_email,
            'order_status': order.order_status
        }

    def _notify_status_changed(self, order: Order, old_status: str) -> None:
        event = self._order_event(order)
        event['old_status'] = old_status
        event['new_status'] = order.order_status
        notify_safely(self.notifier.send_order_status_changed, event)
