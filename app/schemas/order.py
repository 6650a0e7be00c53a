"""
Pydantic schemas for order request/response validation
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import Optional, Literal, Union
from decimal import Decimal
from datetime import datetime


class Address(BaseModel):
    """Shipping address"""
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: Optional[str] = None
    country: str = Field(..., min_length=1)
    zip_code: Optional[str] = Field(None, description="Postal code")
    phone: str = Field(..., min_length=3)
    
    @field_validator("zip_code", mode="before")
    @classmethod
    def zip_code_as_text(cls, value):
        return None if value is None else str(value)


class OrderCreate(BaseModel):
    """Schema for creating a new order"""
    product_id: int = Field(..., gt=0, description="Product ID")
    size_selected: str = Field(..., min_length=1, description="Size key (the size's weight)")
    quantity: int = Field(..., gt=0, description="Quantity to order")
    address: Address
    amount: Optional[Decimal] = Field(None, description="Amount shown to the client; never trusted")
    customer_email: Optional[EmailStr] = Field(None, description="Address for order notifications")
    from_cart: bool = False
    cart_item_id: Optional[int] = None
    
    @field_validator("size_selected", mode="before")
    @classmethod
    def size_as_text(cls, value: Union[str, int, float]):
        return str(value) if isinstance(value, (int, float)) else value


class OrderStatusUpdate(BaseModel):
    """Schema for admin order status updates"""
    status: Literal['Shipped', 'Delivered'] = Field(..., description="New order status")


class PriceBreakdownResponse(BaseModel):
    original_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    has_discount: bool
    discount_percentage: Decimal
    discount_per_unit: Decimal


class OrderCreatedResponse(BaseModel):
    """Schema for order creation response"""
    order_id: int
    amount: Decimal
    amount_adjusted: bool = Field(False, description="True if the client amount was replaced")
    pricing: PriceBreakdownResponse


class OrderResponse(BaseModel):
    """Schema for order response"""
    id: int
    user_id: str
    product_id: int
    size_selected: str
    quantity: int
    address: dict
    customer_email: Optional[str]
    amount_paid: Decimal
    original_amount: Decimal
    discount_amount: Decimal
    discount_percentage: float
    payment_status: str
    order_status: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class OrderListResponse(BaseModel):
    """Schema for list of orders response"""
    orders: list[OrderResponse]
    total: int
    page: int
    limit: int
