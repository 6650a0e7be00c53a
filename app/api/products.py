"""
Product API endpoints (public catalog)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import http_error
from app.database import get_db
from app.exceptions import ShopError
from app.services.product_service import ProductService
from app.schemas.product import ProductResponse, ProductListResponse

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency to get ProductService instance"""
    return ProductService(db)


@router.get("", response_model=ProductListResponse, summary="Get all products")
def get_products(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Products per page"),
    search: Optional[str] = Query(None, description="Case-insensitive name search"),
    service: ProductService = Depends(get_product_service)
):
    """Retrieve products with pagination and optional search"""
    return service.get_all_products(page=page, limit=limit, search=search)


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product by ID")
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """Retrieve a specific product by ID"""
    try:
        return service.get_product_by_id(product_id)
    except ShopError as e:
        raise http_error(e)
