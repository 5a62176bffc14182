"""SQLAlchemy-backed storage."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..db.session import SessionScope
from ..errors import NotFoundError, ValidationError
from ..models import CartItem, Order, OrderItem, Product, User, WishlistItem
from ..models.base import utcnow
from ..services.logging import log_event
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


def _user_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        profile_image_url=row.profile_image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _product_record(row: Optional[Product]) -> Optional[ProductRecord]:
    if row is None:
        return None
    return ProductRecord(
        id=row.id,
        name=row.name,
        description=row.description,
        category=row.category,
        price=Decimal(row.price),
        original_price=Decimal(row.original_price) if row.original_price is not None else None,
        image_url=row.image_url,
        cut_styles=list(row.cut_styles or []),
        freshness_days=row.freshness_days,
        is_organic=bool(row.is_organic),
        nutrition_info=dict(row.nutrition_info) if row.nutrition_info else None,
        is_active=bool(row.is_active),
        stock=row.stock or 0,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _cart_item_record(row: CartItem) -> CartItemRecord:
    return CartItemRecord(
        id=row.id,
        user_id=row.user_id,
        product_id=row.product_id,
        quantity=row.quantity,
        cut_style=row.cut_style,
        created_at=row.created_at,
        product=_product_record(row.product),
    )


def _order_record(row: Order) -> OrderRecord:
    return OrderRecord(
        id=row.id,
        user_id=row.user_id,
        status=row.status,
        subtotal=Decimal(row.subtotal),
        tax=Decimal(row.tax),
        delivery_fee=Decimal(row.delivery_fee),
        total_amount=Decimal(row.total_amount),
        currency=row.currency,
        delivery_address=dict(row.delivery_address or {}),
        delivery_slot=row.delivery_slot,
        payment_method=row.payment_method,
        payment_status=row.payment_status,
        created_at=row.created_at,
        updated_at=row.updated_at,
        order_items=[
            OrderItemRecord(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                product_name=it.product_name,
                quantity=it.quantity,
                cut_style=it.cut_style,
                price=Decimal(it.price),
                created_at=it.created_at,
                product=_product_record(it.product),
            )
            for it in row.items
        ],
    )


def _wishlist_record(row: WishlistItem) -> WishlistRecord:
    return WishlistRecord(
        id=row.id,
        user_id=row.user_id,
        product_id=row.product_id,
        created_at=row.created_at,
        product=_product_record(row.product),
    )


class DatabaseStorage(Storage):
    """Storage over SQLAlchemy sessions; one session per operation."""

    name = "database"

    def __init__(self, session_factory: SessionScope):
        self._session_factory = session_factory

    def seed_demo_products(self) -> int:
        """Load the demo catalog into an empty product table."""
        with self._session_factory() as session:
            if session.query(Product.id).first() is not None:
                return 0
            now = utcnow()
            for item in DEMO_PRODUCTS:
                session.add(Product(created_at=now, updated_at=now, is_active=True, **item))
            session.flush()
            log_event("info", "catalog.seeded", products=len(DEMO_PRODUCTS))
            return len(DEMO_PRODUCTS)

    # users

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self._session_factory() as session:
            row = session.get(User, user_id)
            return _user_record(row) if row else None

    def upsert_user(self, user_id: str, data: Dict[str, Any]) -> UserRecord:
        fields = {k: v for k, v in (data or {}).items() if k in USER_FIELDS}
        with self._session_factory() as session:
            row = session.get(User, user_id)
            if row is None:
                row = User(id=user_id, **fields)
                session.add(row)
            else:
                for key, value in fields.items():
                    setattr(row, key, value)
                row.updated_at = utcnow()
            session.flush()
            return _user_record(row)

    # products

    @staticmethod
    def _active_products(session):
        return session.query(Product).filter(Product.is_active.is_(True))

    def get_products(self) -> List[ProductRecord]:
        with self._session_factory() as session:
            rows = self._active_products(session).order_by(Product.created_at.desc(), Product.id.asc()).all()
            return [_product_record(r) for r in rows]

    def get_product(self, product_id: str) -> Optional[ProductRecord]:
        with self._session_factory() as session:
            row = self._active_products(session).filter(Product.id == product_id).first()
            return _product_record(row)

    def get_products_by_category(self, category: str) -> List[ProductRecord]:
        with self._session_factory() as session:
            rows = (
                self._active_products(session)
                .filter(Product.category == category)
                .order_by(Product.created_at.desc(), Product.id.asc())
                .all()
            )
            return [_product_record(r) for r in rows]

    def create_product(self, data: Dict[str, Any]) -> ProductRecord:
        fields = {k: v for k, v in data.items() if k in PRODUCT_FIELDS}
        fields.setdefault("cut_styles", [])
        fields.setdefault("is_active", True)
        with self._session_factory() as session:
            row = Product(id=str(uuid4()), **fields)
            session.add(row)
            session.flush()
            return _product_record(row)

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[ProductRecord]:
        fields = {k: v for k, v in updates.items() if k in PRODUCT_FIELDS}
        with self._session_factory() as session:
            row = session.get(Product, product_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            session.flush()
            return _product_record(row)

    def delete_product(self, product_id: str) -> bool:
        with self._session_factory() as session:
            result = session.execute(
                update(Product)
                .where(Product.id == product_id)
                .values(is_active=False, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

    # cart

    def get_cart_items(self, user_id: str) -> List[CartItemRecord]:
        with self._session_factory() as session:
            rows = (
                session.query(CartItem)
                .filter(CartItem.user_id == user_id)
                .order_by(CartItem.created_at.asc(), CartItem.id.asc())
                .all()
            )
            return [_cart_item_record(r) for r in rows]

    def get_cart_item(self, item_id: str) -> Optional[CartItemRecord]:
        with self._session_factory() as session:
            row = session.get(CartItem, item_id)
            return _cart_item_record(row) if row else None

    def add_to_cart(self, *, user_id: str, product_id: str, quantity: int, cut_style: str) -> CartItemRecord:
        try:
            return self._merge_cart_line(user_id, product_id, quantity, cut_style)
        except IntegrityError:
            # a concurrent insert of the same line won the unique constraint
            log_event("info", "cart.merge_retry", user_id=user_id, product_id=product_id, cut_style=cut_style)
            return self._merge_cart_line(user_id, product_id, quantity, cut_style)

    def _merge_cart_line(self, user_id: str, product_id: str, quantity: int, cut_style: str) -> CartItemRecord:
        with self._session_factory() as session:
            if self._active_products(session).filter(Product.id == product_id).first() is None:
                raise NotFoundError("Product not found")
            line = (
                CartItem.user_id == user_id,
                CartItem.product_id == product_id,
                CartItem.cut_style == cut_style,
            )
            result = session.execute(
                update(CartItem)
                .where(*line)
                .values(quantity=CartItem.quantity + quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                row = session.query(CartItem).filter(*line).one()
            else:
                row = CartItem(
                    id=str(uuid4()),
                    user_id=user_id,
                    product_id=product_id,
                    quantity=quantity,
                    cut_style=cut_style,
                )
                session.add(row)
                session.flush()
            return _cart_item_record(row)

    def update_cart_item(self, item_id: str, quantity: int) -> Optional[CartItemRecord]:
        with self._session_factory() as session:
            row = session.get(CartItem, item_id)
            if row is None:
                return None
            row.quantity = quantity
            session.flush()
            return _cart_item_record(row)

    def remove_from_cart(self, item_id: str) -> bool:
        with self._session_factory() as session:
            deleted = session.query(CartItem).filter(CartItem.id == item_id).delete(synchronize_session=False)
            return deleted > 0

    def clear_cart(self, user_id: str) -> int:
        with self._session_factory() as session:
            return session.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)

    # orders

    def get_orders(self, user_id: Optional[str] = None) -> List[OrderRecord]:
        with self._session_factory() as session:
            q = session.query(Order)
            if user_id is not None:
                q = q.filter(Order.user_id == user_id)
            rows = q.order_by(Order.created_at.desc(), Order.id.asc()).all()
            return [_order_record(r) for r in rows]

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        with self._session_factory() as session:
            row = session.get(Order, order_id)
            return _order_record(row) if row else None

    def create_order(self, order: NewOrder, items: List[NewOrderItem]) -> OrderRecord:
        if not items:
            raise ValidationError.for_field("orderItems", "Order must contain at least one item")
        with self._session_factory() as session:
            ids = {it.product_id for it in items}
            products = {p.id: p for p in session.query(Product).filter(Product.id.in_(ids)).all()}
            missing = sorted(ids - set(products))
            if missing:
                raise NotFoundError(f"Product {missing[0]} not found")
            row = Order(
                id=str(uuid4()),
                user_id=order.user_id,
                status=order.status,
                subtotal=order.subtotal,
                tax=order.tax,
                delivery_fee=order.delivery_fee,
                total_amount=order.total_amount,
                currency=order.currency,
                delivery_address=dict(order.delivery_address),
                delivery_slot=order.delivery_slot,
                payment_method=order.payment_method,
                payment_status=order.payment_status,
            )
            row.items = [
                OrderItem(
                    id=str(uuid4()),
                    position=index,
                    product_id=it.product_id,
                    product_name=products[it.product_id].name,
                    quantity=it.quantity,
                    cut_style=it.cut_style,
                    price=it.price,
                    product=products[it.product_id],
                )
                for index, it in enumerate(items)
            ]
            session.add(row)
            # order and items share this transaction; the session scope commits both or neither
            session.flush()
            return _order_record(row)

    def update_order_status(self, order_id: str, status: str) -> Optional[OrderRecord]:
        with self._session_factory() as session:
            row = session.get(Order, order_id)
            if row is None:
                return None
            row.status = status
            row.updated_at = utcnow()
            session.flush()
            return _order_record(row)

    # wishlist

    def get_wishlist(self, user_id: str) -> List[WishlistRecord]:
        with self._session_factory() as session:
            rows = (
                session.query(WishlistItem)
                .filter(WishlistItem.user_id == user_id)
                .order_by(WishlistItem.created_at.asc(), WishlistItem.id.asc())
                .all()
            )
            return [_wishlist_record(r) for r in rows]

    def add_to_wishlist(self, *, user_id: str, product_id: str) -> WishlistRecord:
        try:
            return self._insert_wishlist_entry(user_id, product_id)
        except IntegrityError:
            with self._session_factory() as session:
                row = (
                    session.query(WishlistItem)
                    .filter(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
                    .one()
                )
                return _wishlist_record(row)

    def _insert_wishlist_entry(self, user_id: str, product_id: str) -> WishlistRecord:
        with self._session_factory() as session:
            if self._active_products(session).filter(Product.id == product_id).first() is None:
                raise NotFoundError("Product not found")
            row = (
                session.query(WishlistItem)
                .filter(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
                .first()
            )
            if row is None:
                row = WishlistItem(id=str(uuid4()), user_id=user_id, product_id=product_id)
                session.add(row)
                session.flush()
            return _wishlist_record(row)

    def remove_from_wishlist(self, user_id: str, product_id: str) -> bool:
        with self._session_factory() as session:
            deleted = (
                session.query(WishlistItem)
                .filter(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
                .delete(synchronize_session=False)
            )
            return deleted > 0
