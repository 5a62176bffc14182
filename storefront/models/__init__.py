from .base import Base
from .user import User
from .product import Product
from .cart_item import CartItem
from .order import Order, OrderItem
from .wishlist import WishlistItem

__all__ = ["Base", "User", "Product", "CartItem", "Order", "OrderItem", "WishlistItem"]
