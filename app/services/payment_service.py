"""
Payment Service - payment attempts and completion signals

Every completion signal (provider webhook, verify fallback, test shortcut)
goes through ``_apply_outcome`` so that the order is confirmed and stock
decremented at most once.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.models.order import OrderStatus, PaymentState
from app.models.payment import Payment, PaymentStatus
from app.repositories.payment_repository import PaymentRepository
from app.schemas.payment import PaymentLinkResponse, PaymentResponse, VerifyPaymentResponse
from app.services.order_service import OrderService
from app.services.payment_client import PaymentProviderClient

logger = logging.getLogger(__name__)

# Provider status strings (lower-cased) -> internal status.
# Anything not listed maps to Pending.
PROVIDER_STATUS_MAP = {
    "paid": PaymentStatus.SUCCESS,
    "success": PaymentStatus.SUCCESS,
    "completed": PaymentStatus.SUCCESS,
    "failed": PaymentStatus.FAILED,
    "cancelled": PaymentStatus.FAILED,
    "expired": PaymentStatus.FAILED,
}


def map_provider_status(raw_status) -> PaymentStatus:
    """Map a provider status string to PaymentStatus; unknown values are Pending"""
    if not isinstance(raw_status, str):
        return PaymentStatus.PENDING
    return PROVIDER_STATUS_MAP.get(raw_status.strip().lower(), PaymentStatus.PENDING)


@dataclass
class PaymentOutcome:
    status: PaymentStatus
    order_confirmed: bool = False
    duplicate: bool = False


class PaymentService:
    """Service layer for payments"""

    def __init__(
        self,
        db: Session,
        payment_client: Optional[PaymentProviderClient] = None,
        order_service: Optional[OrderService] = None
    ):
        self.db = db
        self.repository = PaymentRepository(db)
        self.payment_client = payment_client or PaymentProviderClient()
        self.order_service = order_service or OrderService(db)

    async def create_payment(self, user_id: str, order_id: int) -> PaymentLinkResponse:
        """
        Create a payment link for an order and record the attempt

        The order's persisted amount is charged. The Payment record is only
        written once the provider has answered successfully.

        Raises:
            NotFoundError, UnauthorizedError: Order missing or not owned
            ConflictError: Order already paid or cancelled
            ExternalServiceError: Provider call failed
        """
        order = self.order_service.get_owned_order(user_id, order_id)

        if order.payment_status == PaymentState.COMPLETED.value:
            raise ConflictError("Order is already paid")
        if order.order_status == OrderStatus.CANCELLED.value:
            raise ConflictError("Cancelled orders cannot be paid")

        product_name = order.product.name if order.product else "Shop product"
        items = [{
            "name": f"{product_name} ({order.size_selected}) x{order.quantity}",
            "amount": str(order.amount_paid),
            "quantity": 1
        }]

        link = await self.payment_client.create_link(order.id, order.amount_paid, items)

        self.repository.create({
            'payment_id': link["payment_id"],
            'order_id': order.id,
            'user_id': user_id,
            'amount': order.amount_paid,
            'status': PaymentStatus.PENDING.value
        })
        logger.info("Payment %s created for order %s (%s)", link["payment_id"], order.id, order.amount_paid)

        return PaymentLinkResponse(**link)

    def record_payment_outcome(self, payment_id: str, raw_status) -> PaymentOutcome:
        """
        Handle a completion signal from the provider

        Raises:
            NotFoundError: If no payment record has this provider id
        """
        payment = self.repository.get_by_payment_id(payment_id)
        if not payment:
            logger.error("Payment record not found for payment_id: %s", payment_id)
            raise NotFoundError("Payment record not found")

        status = map_provider_status(raw_status)
        logger.info("Payment %s reported %r -> %s", payment_id, raw_status, status.value)
        return self._apply_outcome(payment, status)

    def _apply_outcome(self, payment: Payment, status: PaymentStatus) -> PaymentOutcome:
        if status == PaymentStatus.SUCCESS:
            if payment.status == PaymentStatus.SUCCESS.value:
                logger.info("Payment %s already succeeded; duplicate signal ignored", payment.payment_id)
                return PaymentOutcome(status=status, duplicate=True)

            confirmed = self.order_service.confirm_payment(payment.order_id, payment)
            if not confirmed:
                self.db.refresh(payment)
                logger.warning(
                    "Payment %s succeeded but order %s was not confirmed by it",
                    payment.payment_id, payment.order_id
                )
            return PaymentOutcome(status=status, order_confirmed=confirmed, duplicate=not confirmed)

        if status == PaymentStatus.FAILED:
            if payment.status == PaymentStatus.SUCCESS.value:
                logger.warning("Ignoring failure signal for succeeded payment %s", payment.payment_id)
                return PaymentOutcome(status=PaymentStatus.SUCCESS, duplicate=True)

            # another handler may have recorded Success since payment was loaded
            if not self.repository.mark_failed_unless_succeeded(payment.payment_id):
                self.db.refresh(payment)
                logger.warning("Ignoring failure signal for succeeded payment %s", payment.payment_id)
                return PaymentOutcome(status=PaymentStatus.SUCCESS, duplicate=True)

            self.db.refresh(payment)
            self.order_service.mark_payment_failed(payment.order_id)
            return PaymentOutcome(status=status)

        return PaymentOutcome(status=PaymentStatus.PENDING)

    def get_payment_status(self, user_id: str, order_id: int) -> PaymentResponse:
        """Latest payment attempt for an order owned by user_id"""
        payment = self.repository.get_latest_for_order(order_id, user_id=user_id)
        if not payment:
            raise NotFoundError("Payment not found")
        return PaymentResponse.model_validate(payment)

    async def verify_payment(self, user_id: str, order_id: int) -> VerifyPaymentResponse:
        """
        Reconcile an order with the provider (fallback when the webhook is late)

        Safe to call any number of times.
        """
        order = self.order_service.get_owned_order(user_id, order_id)
        payment = self.repository.get_latest_for_order(order_id, user_id=user_id)

        if order.payment_status != PaymentState.COMPLETED.value:
            if not payment:
                raise NotFoundError("Payment not found")
            raw_status = await self.payment_client.get_link_status(payment.payment_id)
            self._apply_outcome(payment, map_provider_status(raw_status))
            self.db.refresh(order)
            self.db.refresh(payment)

        return VerifyPaymentResponse(
            order_id=order.id,
            payment_status=order.payment_status,
            order_status=order.order_status,
            payment=PaymentResponse.model_validate(payment) if payment else None
        )

    def test_complete_payment(self, user_id: str, order_id: int) -> PaymentOutcome:
        """
        Mark an order as paid without the provider (non-production only)

        Reuses the latest Pending attempt or creates a synthetic one, then
        runs the normal success path.

        Raises:
            UnauthorizedError: If test payments are disabled
        """
        if not settings.ENABLE_TEST_PAYMENTS or settings.is_production:
            raise UnauthorizedError("Test payments are disabled")

        order = self.order_service.get_owned_order(user_id, order_id)
        if order.payment_status == PaymentState.COMPLETED.value:
            return PaymentOutcome(status=PaymentStatus.SUCCESS, duplicate=True)

        payment = self.repository.get_latest_for_order(order_id, user_id=user_id)
        if not payment or payment.status != PaymentStatus.PENDING.value:
            payment = self.repository.create({
                'payment_id': f"test_{uuid.uuid4().hex}",
                'order_id': order.id,
                'user_id': user_id,
                'amount': order.amount_paid,
                'status': PaymentStatus.PENDING.value
            })
            logger.info("Synthetic payment %s created for order %s", payment.payment_id, order.id)

        return self._apply_outcome(payment, PaymentStatus.SUCCESS)
