"""
Payment API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_current_user_id, get_payment_service, http_error
from app.exceptions import ShopError
from app.services.payment_service import PaymentService
from app.schemas.payment import (
    PaymentCreate,
    PaymentCallback,
    PaymentLinkResponse,
    PaymentOutcomeResponse,
    PaymentResponse,
    SimulatedPaymentRequest,
    VerifyPaymentResponse
)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentLinkResponse, summary="Create payment link")
async def create_payment(
    payment_data: PaymentCreate,
    user_id: str = Depends(get_current_user_id),
    service: PaymentService = Depends(get_payment_service)
):
    """
    Create a payment link for an order
    
    The order's stored amount is charged; **amount** in the body is ignored.
    """
    try:
        return await service.create_payment(user_id, payment_data.order_id)
    except ShopError as e:
        raise http_error(e)


@router.post("/callback", response_model=PaymentOutcomeResponse, summary="Payment provider webhook")
def payment_callback(
    callback: PaymentCallback,
    service: PaymentService = Depends(get_payment_service)
):
    """
    Completion/failure notification from the payment provider (no auth)
    
    Repeated notifications are acknowledged with 200 and have no effect.
    """
    if not callback.payment_id or not callback.status:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: payment_id and status"
        )
    
    try:
        outcome = service.record_payment_outcome(callback.payment_id, callback.status)
    except ShopError as e:
        raise http_error(e)
    
    return PaymentOutcomeResponse(
        message="Payment already processed" if outcome.duplicate else "Payment status updated",
        status=outcome.status.value,
        duplicate=outcome.duplicate
    )


@router.get("/status/{order_id}", response_model=PaymentResponse, summary="Get payment status")
def get_payment_status(
    order_id: int,
    user_id: str = Depends(get_current_user_id),
    service: PaymentService = Depends(get_payment_service)
):
    try:
        return service.get_payment_status(user_id, order_id)
    except ShopError as e:
        raise http_error(e)


@router.get("/verify/{order_id}", response_model=VerifyPaymentResponse, summary="Verify payment")
async def verify_payment(
    order_id: int,
    user_id: str = Depends(get_current_user_id),
    service: PaymentService = Depends(get_payment_service)
):
    """Ask the provider for the payment status and apply it (idempotent)"""
    try:
        return await service.verify_payment(user_id, order_id)
    except ShopError as e:
        raise http_error(e)


@router.post("/test", response_model=PaymentOutcomeResponse, summary="Complete a payment (non-production)")
def complete_test_payment(
    request: SimulatedPaymentRequest,
    user_id: str = Depends(get_current_user_id),
    service: PaymentService = Depends(get_payment_service)
):
    try:
        outcome = service.test_complete_payment(user_id, request.order_id)
    except ShopError as e:
        raise http_error(e)
    
    return PaymentOutcomeResponse(
        message="Order already paid" if outcome.duplicate else "Test payment completed",
        status=outcome.status.value,
        duplicate=outcome.duplicate
    )
