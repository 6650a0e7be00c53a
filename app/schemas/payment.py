"""
Pydantic schemas for payments
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Union
from decimal import Decimal
from datetime import datetime


class PaymentCreate(BaseModel):
    """Schema for starting a payment attempt"""
    order_id: int = Field(..., gt=0)
    amount: Optional[Decimal] = Field(None, description="Ignored; the order's amount is charged")


class PaymentLinkResponse(BaseModel):
    payment_id: str
    payment_url: str


class PaymentCallback(BaseModel):
    """Webhook payload sent by the payment provider"""
    payment_id: Optional[str] = None
    order_id: Optional[Union[str, int]] = None
    status: Optional[str] = None
    amount: Optional[Union[Decimal, str]] = None


class PaymentOutcomeResponse(BaseModel):
    success: bool = True
    message: str
    status: str
    duplicate: bool = False


class SimulatedPaymentRequest(BaseModel):
    order_id: int = Field(..., gt=0)


class PaymentResponse(BaseModel):
    """Schema for payment record response"""
    id: int
    payment_id: str
    order_id: int
    user_id: str
    amount: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class VerifyPaymentResponse(BaseModel):
    order_id: int
    payment_status: str
    order_status: str
    payment: Optional[PaymentResponse] = None
