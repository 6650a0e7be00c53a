"""
Cart Service - per-user cart
"""
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ValidationError
from app.repositories.cart_repository import CartRepository
from app.repositories.product_repository import ProductRepository
from app.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse


class CartService:
    """Service layer for cart operations"""
    
    def __init__(self, db: Session):
        self.repository = CartRepository(db)
        self.product_repository = ProductRepository(db)
    
    def get_cart(self, user_id: str) -> CartResponse:
        cart = self.repository.get_by_user(user_id)
        if not cart:
            return CartResponse(user_id=user_id, items=[])
        return CartResponse.model_validate(cart)
    
    def add_item(self, user_id: str, item: CartItemAdd) -> CartResponse:
        """
        Add a product size to the cart
        
        Raises:
            NotFoundError: If product not found
            ValidationError: If the size does not exist on the product
        """
        product = self.product_repository.get_by_id(item.product_id)
        if not product:
            raise NotFoundError("Product not found")
        
        size = product.find_size(item.size)
        if not size:
            raise ValidationError("Invalid size for this product")
        
        cart = self.repository.get_or_create(user_id)
        cart = self.repository.add_item(cart, product.id, size.key, item.quantity)
        return CartResponse.model_validate(cart)
    
    def update_item(self, user_id: str, update: CartItemUpdate) -> CartResponse:
        """Set a line's quantity; 0 removes the line"""
        cart = self.repository.get_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        
        item = self.repository.get_item(cart, update.item_id)
        if not item:
            raise NotFoundError("Item not found in cart")
        
        cart = self.repository.set_item_quantity(cart, item, update.quantity)
        return CartResponse.model_validate(cart)
    
    def remove_item(self, user_id: str, item_id: int) -> CartResponse:
        cart = self.repository.get_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        if not self.repository.remove_item(cart, item_id):
            raise NotFoundError("Item not found in cart")
        return CartResponse.model_validate(cart)
    
    def clear_cart(self, user_id: str) -> CartResponse:
        cart = self.repository.get_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return CartResponse.model_validate(self.repository.clear(cart))
