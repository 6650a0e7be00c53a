"""
Cart API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user_id, http_error
from app.database import get_db
from app.exceptions import ShopError
from app.services.cart_service import CartService
from app.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse

router = APIRouter(prefix="/cart", tags=["cart"])


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


@router.get("", response_model=CartResponse, summary="Get cart")
def get_cart(
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service)
):
    return service.get_cart(user_id)


@router.post("/add", response_model=CartResponse, summary="Add item to cart")
def add_to_cart(
    item: CartItemAdd,
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service)
):
    """Add a product size; an existing line for the same size is increased"""
    try:
        return service.add_item(user_id, item)
    except ShopError as e:
        raise http_error(e)


@router.put("/update", response_model=CartResponse, summary="Update cart item quantity")
def update_cart_item(
    update: CartItemUpdate,
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service)
):
    try:
        return service.update_item(user_id, update)
    except ShopError as e:
        raise http_error(e)


@router.delete("/items/{item_id}", response_model=CartResponse, summary="Remove item from cart")
def remove_from_cart(
    item_id: int,
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service)
):
    try:
        return service.remove_item(user_id, item_id)
    except ShopError as e:
        raise http_error(e)


@router.delete("", response_model=CartResponse, summary="Clear cart")
def clear_cart(
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service)
):
    try:
        return service.clear_cart(user_id)
    except ShopError as e:
        raise http_error(e)
