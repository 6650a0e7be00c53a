"""
Schemas package
"""
from app.schemas.order import (
    Address,
    OrderCreate,
    OrderStatusUpdate,
    OrderCreatedResponse,
    OrderResponse,
    OrderListResponse
)
from app.schemas.payment import (
    PaymentCreate,
    PaymentCallback,
    PaymentLinkResponse,
    PaymentOutcomeResponse,
    PaymentResponse,
    VerifyPaymentResponse
)
from app.schemas.product import ProductCreate, ProductResponse, ProductListResponse
from app.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse

__all__ = [
    "Address",
    "OrderCreate",
    "OrderStatusUpdate",
    "OrderCreatedResponse",
    "OrderResponse",
    "OrderListResponse",
    "PaymentCreate",
    "PaymentCallback",
    "PaymentLinkResponse",
    "PaymentOutcomeResponse",
    "PaymentResponse",
    "VerifyPaymentResponse",
    "ProductCreate",
    "ProductResponse",
    "ProductListResponse",
    "CartItemAdd",
    "CartItemUpdate",
    "CartResponse"
]
