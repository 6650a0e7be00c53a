"""
Stock Ledger - the product's available quantity

Stock is only ever decremented on first payment confirmation of an order,
and never drops below zero.
"""
import logging

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ValidationError
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StockLedger:
    
    def __init__(self, db: Session):
        self.repository = ProductRepository(db)
    
    def check_available(self, product_id: int, amount: int) -> bool:
        """True if the product has at least amount units in stock"""
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return product.stock >= amount
    
    def decrement(self, product_id: int, amount: int, commit: bool = True) -> int:
        """
        Remove amount units; any deficit is dropped, stock stops at 0
        
        Returns:
            New stock
        """
        if amount < 0:
            raise ValidationError(f"Cannot decrement stock by a negative amount: {amount}")
        
        new_stock = self.repository.decrement_stock(product_id, amount, commit=commit)
        if new_stock is None:
            raise NotFoundError(f"Product {product_id} not found")
        
        logger.info("Stock for product %s decremented by %s, now %s", product_id, amount, new_stock)
        return new_stock
