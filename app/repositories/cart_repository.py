"""
Cart Repository - Data Access Layer
"""
from typing import Optional
from sqlalchemy.orm import Session

from app.models.cart import Cart, CartItem


class CartRepository:
    """Repository for carts and cart lines"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_user(self, user_id: str) -> Optional[Cart]:
        return self.db.query(Cart).filter(Cart.user_id == user_id).first()
    
    def get_or_create(self, user_id: str) -> Cart:
        cart = self.get_by_user(user_id)
        if cart:
            return cart
        cart = Cart(user_id=user_id)
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart
    
    def add_item(self, cart: Cart, product_id: int, size: str, quantity: int) -> Cart:
        """Add a line, merging with an existing line for the same product and size"""
        for item in cart.items:
            if item.product_id == product_id and item.size == size:
                item.quantity += quantity
                break
        else:
            cart.items.append(CartItem(product_id=product_id, size=size, quantity=quantity))
        
        self.db.commit()
        self.db.refresh(cart)
        return cart
    
    def get_item(self, cart: Cart, item_id: int) -> Optional[CartItem]:
        for item in cart.items:
            if item.id == item_id:
                return item
        return None
    
    def set_item_quantity(self, cart: Cart, item: CartItem, quantity: int) -> Cart:
        if quantity == 0:
            cart.items.remove(item)
        else:
            item.quantity = quantity
        self.db.commit()
        self.db.refresh(cart)
        return cart
    
    def remove_item(self, cart: Cart, item_id: int) -> bool:
        """Remove a line; returns False if the line is not in the cart"""
        item = self.get_item(cart, item_id)
        if not item:
            return False
        cart.items.remove(item)
        self.db.commit()
        self.db.refresh(cart)
        return True
    
    def clear(self, cart: Cart) -> Cart:
        cart.items.clear()
        self.db.commit()
        self.db.refresh(cart)
        return cart
