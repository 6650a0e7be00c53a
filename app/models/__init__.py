"""
Models package
"""
from app.models.product import Product, ProductSize
from app.models.order import Order, OrderStatus, PaymentState
from app.models.payment import Payment, PaymentStatus
from app.models.cart import Cart, CartItem

__all__ = [
    "Product",
    "ProductSize",
    "Order",
    "OrderStatus",
    "PaymentState",
    "Payment",
    "PaymentStatus",
    "Cart",
    "CartItem"
]
