"""
Product Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import case, desc, update

from app.models.product import Product, ProductSize
from app.schemas.product import ProductCreate


class ProductRepository:
    """Repository for Product CRUD and stock operations"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def _search_query(self, search: Optional[str] = None):
        query = self.db.query(Product)
        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))
        return query
    
    def get_all(self, skip: int = 0, limit: int = 20, search: Optional[str] = None) -> List[Product]:
        """Get products with pagination, newest first"""
        return self._search_query(search).order_by(
            desc(Product.created_at), desc(Product.id)
        ).offset(skip).limit(limit).all()
    
    def count(self, search: Optional[str] = None) -> int:
        """Get total count of products"""
        return self._search_query(search).count()
    
    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        return self.db.query(Product).filter(Product.id == product_id).first()
    
    def create(self, product_data: ProductCreate) -> Product:
        """Create new product with its sizes"""
        data = product_data.model_dump(exclude={"sizes"})
        product = Product(**data)
        product.sizes = [ProductSize(**size.model_dump()) for size in product_data.sizes]
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product
    
    def decrement_stock(self, product_id: int, quantity: int, commit: bool = True) -> Optional[int]:
        """
        Subtract quantity from stock, flooring at zero
        
        Args:
            product_id: Product ID
            quantity: Units to remove (non-negative)
            commit: Commit immediately; pass False inside a larger unit of work
        
        Returns:
            New stock, or None if product not found
        """
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=case((Product.stock > quantity, Product.stock - quantity), else_=0))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        
        return self.db.query(Product.stock).filter(Product.id == product_id).scalar()
