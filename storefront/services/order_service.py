from typing import Any, Dict, List, Optional
from ..errors import NotFoundError, ValidationError
from ..storage.base import Storage
from ..storage.records import NewOrder, NewOrderItem, OrderRecord
from ..utils.validators import (
    validate_delivery_address,
    validate_delivery_slot,
    validate_order_status,
    validate_payment_method,
)
from .logging import log_event
from .pricing import DEFAULT_POLICY, PricingPolicy, cart_totals


class OrderService:
    """Checkout and order lookup.

    Orders are built from the user's current cart on the server: prices are
    the products' current prices and totals come from the pricing policy, so
    totals sent by a client are never trusted.
    """

    def __init__(self, storage: Storage, policy: PricingPolicy = DEFAULT_POLICY, currency: str = "INR"):
        self._storage = storage
        self._policy = policy
        self._currency = currency

    @staticmethod
    def _checkout_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
        # accept both the flat form and the {orderData: {...}} envelope
        data = payload.get("orderData") if isinstance(payload.get("orderData"), dict) else payload
        errors: Dict[str, str] = {}
        fields: Dict[str, Any] = {}
        checks = (
            ("delivery_address", validate_delivery_address, data.get("deliveryAddress")),
            ("payment_method", validate_payment_method, data.get("paymentMethod")),
            ("delivery_slot", validate_delivery_slot, data.get("deliverySlot")),
        )
        for name, check, value in checks:
            try:
                fields[name] = check(value)
            except ValidationError as exc:
                errors.update(exc.errors)
        if errors:
            raise ValidationError("Please correct the highlighted fields", errors)
        return fields

    def place_order(self, *, user_id: str, payload: Optional[Dict[str, Any]]) -> OrderRecord:
        if not isinstance(payload, dict):
            raise ValidationError("Order payload must be a JSON object")
        fields = self._checkout_fields(payload)

        cart = self._storage.get_cart_items(user_id)
        if not cart:
            raise ValidationError.for_field("cart", "Your cart is empty")
        unavailable = [it for it in cart if it.product is None or not it.product.is_active]
        if unavailable:
            name = unavailable[0].product.name if unavailable[0].product else unavailable[0].product_id
            raise ValidationError.for_field("cart", f"{name} is no longer available")

        totals = cart_totals(cart, self._policy)
        header = NewOrder(
            user_id=user_id,
            subtotal=totals.subtotal,
            tax=totals.tax,
            delivery_fee=totals.delivery_fee,
            total_amount=totals.total,
            currency=self._currency,
            **fields,
        )
        items = [
            NewOrderItem(
                product_id=it.product_id,
                quantity=it.quantity,
                cut_style=it.cut_style,
                price=it.product.price,
            )
            for it in cart
        ]
        order = self._storage.create_order(header, items)
        self._storage.clear_cart(user_id)
        log_event(
            "info",
            "order.created",
            order_id=order.id,
            user_id=user_id,
            items=len(items),
            subtotal=str(totals.subtotal),
            total=str(totals.total),
        )
        return order

    def list_orders(self, user_id: str) -> List[OrderRecord]:
        return self._storage.get_orders(user_id)

    def list_all_orders(self) -> List[OrderRecord]:
        return self._storage.get_orders()

    def get_order(self, order_id: str, *, user_id: Optional[str] = None) -> OrderRecord:
        """Fetch one order; with user_id set, other users' orders read as missing."""
        order = self._storage.get_order(order_id) if order_id else None
        if order is None or (user_id is not None and order.user_id != user_id):
            raise NotFoundError("Order not found")
        return order

    def update_status(self, order_id: str, status: Any) -> OrderRecord:
        value = validate_order_status(status)
        order = self._storage.update_order_status(order_id, value)
        if order is None:
            raise NotFoundError("Order not found")
        log_event("info", "order.status_updated", order_id=order_id, status=value)
        return order
