"""
Pydantic schemas for products
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from decimal import Decimal
from datetime import datetime


class ProductSizeBase(BaseModel):
    weight: Decimal = Field(..., gt=0, description="Size weight, used as the size key")
    price: Decimal = Field(..., ge=0, description="Unit price for this size")
    old_price: Optional[Decimal] = Field(None, ge=0)
    servings: Optional[str] = None


class ProductSizeResponse(ProductSizeBase):
    key: str
    
    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    brand: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    stock: int = Field(..., ge=0, description="Stock quantity (must be non-negative)")
    sizes: list[ProductSizeBase] = Field(..., min_length=1)


class ProductResponse(BaseModel):
    """Schema for product response"""
    id: int
    name: str
    brand: Optional[str]
    description: Optional[str]
    stock: int
    rating: float
    sizes: list[ProductSizeResponse]
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    """Schema for list of products response"""
    products: list[ProductResponse]
    total: int
    page: int
    limit: int
