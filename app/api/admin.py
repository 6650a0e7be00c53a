"""
Admin API endpoints
"""
from fastapi import APIRouter, Depends, status

from app.api.deps import get_order_service, http_error, require_admin
from app.api.products import get_product_service
from app.exceptions import ShopError
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.schemas.order import OrderResponse, OrderStatusUpdate
from app.schemas.product import ProductCreate, ProductResponse

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED, summary="Create product")
def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product
    
    - **sizes**: at least one size with **weight** and **price**
    - **stock**: Stock quantity (required, must be non-negative)
    """
    return service.create_product(product_data)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse, summary="Update order status")
def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service)
):
    """
    Fulfilment transitions: Confirmed -> Shipped -> Delivered
    """
    try:
        return service.update_order_status(order_id, status_data.status)
    except ShopError as e:
        raise http_error(e)
