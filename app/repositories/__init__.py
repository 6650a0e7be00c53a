"""
Repositories package
"""
from app.repositories.order_repository import OrderRepository
from app.repositories.payment_repository import PaymentRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.cart_repository import CartRepository

__all__ = ["OrderRepository", "PaymentRepository", "ProductRepository", "CartRepository"]
