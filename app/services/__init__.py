"""
Services package
"""
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService
from app.services.payment_client import PaymentProviderClient
from app.services.product_service import ProductService
from app.services.cart_service import CartService

__all__ = ["OrderService", "PaymentService", "PaymentProviderClient", "ProductService", "CartService"]
