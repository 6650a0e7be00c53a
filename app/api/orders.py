"""
Order API endpoints
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user_id, get_order_service, http_error
from app.exceptions import ShopError
from app.services.order_service import OrderService
from app.schemas.order import (
    OrderCreate,
    OrderCreatedResponse,
    OrderResponse,
    OrderListResponse
)

router = APIRouter(prefix="/orders", tags=["orders"])

OrderStatusFilter = Literal['Pending', 'Confirmed', 'Shipped', 'Delivered', 'Cancelled']


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED, summary="Create order")
def create_order(
    order_data: OrderCreate,
    user_id: str = Depends(get_current_user_id),
    service: OrderService = Depends(get_order_service)
):
    """
    Create a new order
    
    Process:
    1. Validate product, size and stock
    2. Compute the amount (bulk discount from 5 units)
    3. Save order as Pending/Pending
    4. Remove the cart line when **from_cart** is set
    
    The **amount** sent by the client is never charged; the computed
    amount is returned.
    """
    try:
        return service.create_order(user_id, order_data)
    except ShopError as e:
        raise http_error(e)


@router.get("", response_model=OrderListResponse, summary="Get user orders")
def get_user_orders(
    order_status: Optional[OrderStatusFilter] = Query(None, alias="status", description="Filter by order status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: OrderService = Depends(get_order_service)
):
    """Orders of the authenticated user, newest first"""
    return service.list_user_orders(user_id, order_status=order_status, page=page, limit=limit)


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order by ID")
def get_order(
    order_id: int,
    user_id: str = Depends(get_current_user_id),
    service: OrderService = Depends(get_order_service)
):
    try:
        return service.get_order(user_id, order_id)
    except ShopError as e:
        raise http_error(e)


@router.put("/{order_id}/cancel", response_model=OrderResponse, summary="Cancel order")
def cancel_order(
    order_id: int,
    user_id: str = Depends(get_current_user_id),
    service: OrderService = Depends(get_order_service)
):
    """Cancel an order; only Pending orders can be cancelled"""
    try:
        return service.cancel_order(user_id, order_id)
    except ShopError as e:
        raise http_error(e)
