"""
Pydantic schemas for the cart
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Union


class CartItemAdd(BaseModel):
    product_id: int = Field(..., gt=0)
    size: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0)
    
    @field_validator("size", mode="before")
    @classmethod
    def size_as_text(cls, value: Union[str, int, float]):
        return str(value) if isinstance(value, (int, float)) else value


class CartItemUpdate(BaseModel):
    item_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0, description="0 removes the line")


class CartItemResponse(BaseModel):
    id: int
    product_id: int
    size: str
    quantity: int
    
    model_config = ConfigDict(from_attributes=True)


class CartResponse(BaseModel):
    user_id: str
    items: list[CartItemResponse] = []
    
    model_config = ConfigDict(from_attributes=True)
