"""
SQLAlchemy Product models
"""
from decimal import Decimal, InvalidOperation

from sqlalchemy import Column, Integer, String, Float, Numeric, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Product(Base):
    """Product database model"""
    
    __tablename__ = "products"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    brand = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    sizes = relationship(
        "ProductSize",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductSize.weight",
        lazy="selectin"
    )
    
    # Constraints
    __table_args__ = (
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
    )
    
    def find_size(self, size_key: str):
        """Return the size whose weight matches size_key, or None"""
        for size in self.sizes:
            if size.matches(size_key):
                return size
        return None
    
    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"


class ProductSize(Base):
    """A purchasable size (weight) of a product with its own price"""
    
    __tablename__ = "product_sizes"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    weight = Column(Numeric(10, 2), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    old_price = Column(Numeric(10, 2), nullable=True)
    servings = Column(String(100), nullable=True)
    
    product = relationship("Product", back_populates="sizes")
    
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_size_price_non_negative'),
    )
    
    @property
    def key(self) -> str:
        """Size key as clients send it: the weight without trailing zeros"""
        weight = Decimal(str(self.weight)).normalize()
        return format(weight, "f")
    
    def matches(self, size_key) -> bool:
        try:
            return Decimal(str(size_key).strip()) == Decimal(str(self.weight))
        except (InvalidOperation, ValueError):
            return False
    
    def __repr__(self):
        return f"<ProductSize(product_id={self.product_id}, weight={self.weight}, price={self.price})>"
