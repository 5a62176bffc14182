"""Storage interface shared by the memory and database backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .records import (
    CartItemRecord,
    NewOrder,
    NewOrderItem,
    OrderRecord,
    ProductRecord,
    UserRecord,
    WishlistRecord,
)


# Columns a caller may set through create_product / update_product.
PRODUCT_FIELDS = (
    "name",
    "description",
    "category",
    "price",
    "original_price",
    "image_url",
    "cut_styles",
    "freshness_days",
    "is_organic",
    "nutrition_info",
    "is_active",
    "stock",
)

USER_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


class Storage(ABC):
    """Persistence for users, products, carts, orders and wishlists.

    Contract every backend honours:

    - product reads skip inactive products (``None`` / omitted);
    - ``add_to_cart`` folds a line sharing (user, product, cut style) into
      the existing row by summing quantities;
    - ``create_order`` writes the order and all of its items, or nothing;
    - lookups of a missing row return ``None``, removals return ``False``.
    """

    name = "abstract"

    # users

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def upsert_user(self, user_id: str, data: Dict[str, Any]) -> UserRecord:
        ...

    # products

    @abstractmethod
    def get_products(self) -> List[ProductRecord]:
        ...

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[ProductRecord]:
        ...

    @abstractmethod
    def get_products_by_category(self, category: str) -> List[ProductRecord]:
        ...

    @abstractmethod
    def create_product(self, data: Dict[str, Any]) -> ProductRecord:
        ...

    @abstractmethod
    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[ProductRecord]:
        ...

    @abstractmethod
    def delete_product(self, product_id: str) -> bool:
        """Soft delete: clear the active flag."""

    # cart

    @abstractmethod
    def get_cart_items(self, user_id: str) -> List[CartItemRecord]:
        ...

    @abstractmethod
    def get_cart_item(self, item_id: str) -> Optional[CartItemRecord]:
        ...

    @abstractmethod
    def add_to_cart(self, *, user_id: str, product_id: str, quantity: int, cut_style: str) -> CartItemRecord:
        ...

    @abstractmethod
    def update_cart_item(self, item_id: str, quantity: int) -> Optional[CartItemRecord]:
        ...

    @abstractmethod
    def remove_from_cart(self, item_id: str) -> bool:
        ...

    @abstractmethod
    def clear_cart(self, user_id: str) -> int:
        """Delete every cart line of user_id, returning how many were removed."""

    # orders

    @abstractmethod
    def get_orders(self, user_id: Optional[str] = None) -> List[OrderRecord]:
        ...

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        ...

    @abstractmethod
    def create_order(self, order: NewOrder, items: List[NewOrderItem]) -> OrderRecord:
        ...

    @abstractmethod
    def update_order_status(self, order_id: str, status: str) -> Optional[OrderRecord]:
        ...

    # wishlist

    @abstractmethod
    def get_wishlist(self, user_id: str) -> List[WishlistRecord]:
        ...

    @abstractmethod
    def add_to_wishlist(self, *, user_id: str, product_id: str) -> WishlistRecord:
        ...

    @abstractmethod
    def remove_from_wishlist(self, user_id: str, product_id: str) -> bool:
        ...
