"""Process-memory storage, pre-seeded with the demo catalog."""

from __future__ import annotations

import copy
import threading
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..errors import NotFoundError, ValidationError
from ..models.base import utcnow
from .base import PRODUCT_FIELDS, USER_FIELDS, Storage
from .demo_data import DEMO_PRODUCTS
from .records import (
    CartItemRecord,
    NewOrder,
    NewOrderItem,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    UserRecord,
    WishlistRecord,
)


def _newest_first(records):
    return sorted(sorted(records, key=lambda r: r.id), key=lambda r: r.created_at, reverse=True)


def _oldest_first(records):
    return sorted(records, key=lambda r: (r.created_at, r.id))


class MemoryStorage(Storage):
    """Dict-backed storage; every mutation runs under one lock."""

    name = "memory"

    def __init__(self, *, seed_demo_data: bool = True) -> None:
        self._lock = threading.RLock()
        self._users: Dict[str, UserRecord] = {}
        self._products: Dict[str, ProductRecord] = {}
        self._cart: Dict[str, CartItemRecord] = {}
        self._orders: Dict[str, OrderRecord] = {}
        self._wishlist: Dict[str, WishlistRecord] = {}
        if seed_demo_data:
            self._seed()

    def _seed(self) -> None:
        now = utcnow()
        for item in DEMO_PRODUCTS:
            data = copy.deepcopy(item)
            product = ProductRecord(created_at=now, updated_at=now, **data)
            self._products[product.id] = product

    # users

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def upsert_user(self, user_id: str, data: Dict[str, Any]) -> UserRecord:
        fields = {k: v for k, v in (data or {}).items() if k in USER_FIELDS}
        now = utcnow()
        with self._lock:
            existing = self._users.get(user_id)
            if existing:
                user = replace(existing, updated_at=now, **fields)
            else:
                user = UserRecord(id=user_id, created_at=now, updated_at=now, **fields)
            self._users[user_id] = user
            return replace(user)

    # products

    def _active(self, product_id: str) -> Optional[ProductRecord]:
        product = self._products.get(product_id)
        if product is None or not product.is_active:
            return None
        return product

    def get_products(self) -> List[ProductRecord]:
        with self._lock:
            rows = [p for p in self._products.values() if p.is_active]
            return [copy.deepcopy(p) for p in _newest_first(rows)]

    def get_product(self, product_id: str) -> Optional[ProductRecord]:
        with self._lock:
            product = self._active(product_id)
            return copy.deepcopy(product) if product else None

    def get_products_by_category(self, category: str) -> List[ProductRecord]:
        with self._lock:
            rows = [p for p in self._products.values() if p.is_active and p.category == category]
            return [copy.deepcopy(p) for p in _newest_first(rows)]

    def create_product(self, data: Dict[str, Any]) -> ProductRecord:
        fields = {k: copy.deepcopy(v) for k, v in data.items() if k in PRODUCT_FIELDS}
        now = utcnow()
        product = ProductRecord(id=str(uuid4()), created_at=now, updated_at=now, **fields)
        with self._lock:
            self._products[product.id] = product
            return copy.deepcopy(product)

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[ProductRecord]:
        fields = {k: copy.deepcopy(v) for k, v in updates.items() if k in PRODUCT_FIELDS}
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                return None
            updated = replace(product, updated_at=utcnow(), **fields)
            self._products[product_id] = updated
            return copy.deepcopy(updated)

    def delete_product(self, product_id: str) -> bool:
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                return False
            self._products[product_id] = replace(product, is_active=False, updated_at=utcnow())
            return True

    # cart

    def _with_product(self, item):
        result = copy.deepcopy(item)
        product = self._products.get(item.product_id)
        result.product = copy.deepcopy(product) if product else None
        return result

    def get_cart_items(self, user_id: str) -> List[CartItemRecord]:
        with self._lock:
            rows = [it for it in self._cart.values() if it.user_id == user_id]
            return [self._with_product(it) for it in _oldest_first(rows)]

    def get_cart_item(self, item_id: str) -> Optional[CartItemRecord]:
        with self._lock:
            item = self._cart.get(item_id)
            return self._with_product(item) if item else None

    def add_to_cart(self, *, user_id: str, product_id: str, quantity: int, cut_style: str) -> CartItemRecord:
        with self._lock:
            if self._active(product_id) is None:
                raise NotFoundError("Product not found")
            for item in self._cart.values():
                if item.user_id == user_id and item.product_id == product_id and item.cut_style == cut_style:
                    item.quantity += quantity
                    return self._with_product(item)
            item = CartItemRecord(
                id=str(uuid4()),
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
                cut_style=cut_style,
                created_at=utcnow(),
            )
            self._cart[item.id] = item
            return self._with_product(item)

    def update_cart_item(self, item_id: str, quantity: int) -> Optional[CartItemRecord]:
        with self._lock:
            item = self._cart.get(item_id)
            if item is None:
                return None
            item.quantity = quantity
            return self._with_product(item)

    def remove_from_cart(self, item_id: str) -> bool:
        with self._lock:
            return self._cart.pop(item_id, None) is not None

    def clear_cart(self, user_id: str) -> int:
        with self._lock:
            ids = [k for k, it in self._cart.items() if it.user_id == user_id]
            for k in ids:
                del self._cart[k]
            return len(ids)

    # orders

    def _order_view(self, order: OrderRecord) -> OrderRecord:
        result = copy.deepcopy(order)
        for it in result.order_items:
            product = self._products.get(it.product_id)
            it.product = copy.deepcopy(product) if product else None
        return result

    def get_orders(self, user_id: Optional[str] = None) -> List[OrderRecord]:
        with self._lock:
            rows = [o for o in self._orders.values() if user_id is None or o.user_id == user_id]
            return [self._order_view(o) for o in _newest_first(rows)]

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        with self._lock:
            order = self._orders.get(order_id)
            return self._order_view(order) if order else None

    def create_order(self, order: NewOrder, items: List[NewOrderItem]) -> OrderRecord:
        if not items:
            raise ValidationError.for_field("orderItems", "Order must contain at least one item")
        with self._lock:
            # resolve every product before anything is stored
            products = []
            for it in items:
                product = self._products.get(it.product_id)
                if product is None:
                    raise NotFoundError(f"Product {it.product_id} not found")
                products.append(product)
            now = utcnow()
            order_id = str(uuid4())
            record = OrderRecord(
                id=order_id,
                user_id=order.user_id,
                status=order.status,
                subtotal=Decimal(order.subtotal),
                tax=Decimal(order.tax),
                delivery_fee=Decimal(order.delivery_fee),
                total_amount=Decimal(order.total_amount),
                currency=order.currency,
                delivery_address=dict(order.delivery_address),
                delivery_slot=order.delivery_slot,
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                created_at=now,
                updated_at=now,
                order_items=[
                    OrderItemRecord(
                        id=str(uuid4()),
                        order_id=order_id,
                        product_id=it.product_id,
                        product_name=product.name,
                        quantity=it.quantity,
                        cut_style=it.cut_style,
                        price=Decimal(it.price),
                        created_at=now,
                    )
                    for it, product in zip(items, products)
                ],
            )
            self._orders[order_id] = record
            return self._order_view(record)

    def update_order_status(self, order_id: str, status: str) -> Optional[OrderRecord]:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            order.status = status
            order.updated_at = utcnow()
            return self._order_view(order)

    # wishlist

    def get_wishlist(self, user_id: str) -> List[WishlistRecord]:
        with self._lock:
            rows = [w for w in self._wishlist.values() if w.user_id == user_id]
            return [self._with_product(w) for w in _oldest_first(rows)]

    def add_to_wishlist(self, *, user_id: str, product_id: str) -> WishlistRecord:
        with self._lock:
            if self._active(product_id) is None:
                raise NotFoundError("Product not found")
            for entry in self._wishlist.values():
                if entry.user_id == user_id and entry.product_id == product_id:
                    return self._with_product(entry)
            entry = WishlistRecord(id=str(uuid4()), user_id=user_id, product_id=product_id, created_at=utcnow())
            self._wishlist[entry.id] = entry
            return self._with_product(entry)

    def remove_from_wishlist(self, user_id: str, product_id: str) -> bool:
        with self._lock:
            for key, entry in list(self._wishlist.items()):
                if entry.user_id == user_id and entry.product_id == product_id:
                    del self._wishlist[key]
                    return True
            return False
