"""
Product Service - catalog
"""
from typing import Optional
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.repositories.product_repository import ProductRepository
from app.schemas.product import ProductCreate, ProductResponse, ProductListResponse


class ProductService:
    """Service layer for product catalog"""
    
    def __init__(self, db: Session):
        self.repository = ProductRepository(db)
    
    def get_all_products(self, page: int = 1, limit: int = 20, search: Optional[str] = None) -> ProductListResponse:
        """Get products with pagination and optional name search"""
        products = self.repository.get_all(skip=(page - 1) * limit, limit=limit, search=search)
        total = self.repository.count(search=search)
        
        return ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            total=total,
            page=page,
            limit=limit
        )
    
    def get_product_by_id(self, product_id: int) -> ProductResponse:
        """Get product by ID"""
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return ProductResponse.model_validate(product)
    
    def create_product(self, product_data: ProductCreate) -> ProductResponse:
        """Create new product"""
        product = self.repository.create(product_data)
        return ProductResponse.model_validate(product)
