from typing import Any, List, Optional, Tuple
from ..errors import NotFoundError, ValidationError
from ..storage.base import Storage
from ..storage.records import CartItemRecord, ProductRecord
from ..utils.validators import ensure_positive_int
from .logging import log_event
from .pricing import DEFAULT_POLICY, OrderTotals, PricingPolicy, cart_totals


class CartService:
    """Per-user cart operations over any Storage backend."""

    def __init__(self, storage: Storage, policy: PricingPolicy = DEFAULT_POLICY):
        self._storage = storage
        self._policy = policy

    def get_cart(self, user_id: str) -> Tuple[List[CartItemRecord], OrderTotals]:
        items = self._storage.get_cart_items(user_id)
        return items, cart_totals(items, self._policy)

    @staticmethod
    def _resolve_cut_style(product: ProductRecord, cut_style: Optional[str]) -> str:
        value = (cut_style or "").strip()
        styles = product.cut_styles or []
        if not styles:
            return value
        if not value:
            return styles[0]
        if value not in styles:
            raise ValidationError.for_field("cutStyle", f"Cut style must be one of {', '.join(styles)}")
        return value

    @staticmethod
    def _check_stock(product: ProductRecord, quantity: int) -> None:
        if product.stock is not None and quantity > int(product.stock):
            raise ValidationError.for_field("quantity", f"Only {product.stock} left in stock")

    def add_item(self, *, user_id: str, product_id: Any, quantity: Any = 1, cut_style: Optional[str] = None) -> CartItemRecord:
        if not product_id:
            raise ValidationError.for_field("productId", "productId is required")
        qnty = ensure_positive_int(1 if quantity is None else quantity, "quantity")
        product = self._storage.get_product(str(product_id))
        if product is None:
            raise NotFoundError("Product not found")
        style = self._resolve_cut_style(product, cut_style)

        in_cart = sum(
            it.quantity
            for it in self._storage.get_cart_items(user_id)
            if it.product_id == product.id and it.cut_style == style
        )
        self._check_stock(product, in_cart + qnty)

        item = self._storage.add_to_cart(user_id=user_id, product_id=product.id, quantity=qnty, cut_style=style)
        log_event(
            "info",
            "cart.item_merged" if in_cart else "cart.item_added",
            user_id=user_id,
            item_id=item.id,
            product_id=product.id,
            cut_style=style,
            quantity=item.quantity,
        )
        return item

    def _owned_item(self, user_id: str, item_id: str) -> CartItemRecord:
        item = self._storage.get_cart_item(item_id) if item_id else None
        if item is None or item.user_id != user_id:
            raise NotFoundError("Cart item not found")
        return item

    def update_item(self, *, user_id: str, item_id: str, quantity: Any) -> Optional[CartItemRecord]:
        """Set a line's quantity; zero removes the line and returns None."""
        if quantity is None:
            raise ValidationError.for_field("quantity", "quantity is required")
        qnty = ensure_positive_int(quantity, "quantity", allow_zero=True)
        item = self._owned_item(user_id, item_id)
        if qnty == 0:
            self._storage.remove_from_cart(item.id)
            log_event("info", "cart.item_removed", user_id=user_id, item_id=item.id)
            return None
        if item.product is not None:
            self._check_stock(item.product, qnty)
        updated = self._storage.update_cart_item(item.id, qnty)
        if updated is None:
            raise NotFoundError("Cart item not found")
        return updated

    def remove_item(self, *, user_id: str, item_id: str) -> None:
        item = self._owned_item(user_id, item_id)
        if not self._storage.remove_from_cart(item.id):
            raise NotFoundError("Cart item not found")
        log_event("info", "cart.item_removed", user_id=user_id, item_id=item.id)

    def clear(self, user_id: str) -> int:
        removed = self._storage.clear_cart(user_id)
        log_event("info", "cart.cleared", user_id=user_id, removed=removed)
        return removed
