"""Order total rules shared by the cart summary and order placement."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Tuple

from ..storage.records import CartItemRecord, money


CENTS = Decimal("0.01")
WHOLE = Decimal("1")


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: Decimal = Decimal("0.18")
    free_delivery_threshold: Decimal = Decimal("500")
    delivery_fee: Decimal = Decimal("50")

    @classmethod
    def from_config(cls, config) -> "PricingPolicy":
        return cls(
            tax_rate=Decimal(config.tax_rate),
            free_delivery_threshold=Decimal(config.free_delivery_threshold),
            delivery_fee=Decimal(config.delivery_fee),
        )


DEFAULT_POLICY = PricingPolicy()


@dataclass(frozen=True)
class OrderTotals:
    item_count: int
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total: Decimal
    free_delivery_remaining: Decimal

    def to_dict(self) -> Dict:
        return {
            "itemCount": self.item_count,
            "subtotal": money(self.subtotal),
            "tax": money(self.tax),
            "deliveryFee": money(self.delivery_fee),
            "total": money(self.total),
            "freeDeliveryRemaining": money(self.free_delivery_remaining),
        }


def compute_totals(lines: Iterable[Tuple[Decimal, int]], policy: PricingPolicy = DEFAULT_POLICY) -> OrderTotals:
    """Totals for (unit price, quantity) lines.

    Tax is rounded half-up to a whole unit. Delivery is free once the
    subtotal reaches the threshold. An empty cart owes nothing, delivery
    included.
    """
    subtotal = Decimal("0")
    count = 0
    for price, quantity in lines:
        subtotal += Decimal(str(price)) * int(quantity)
        count += int(quantity)
    subtotal = subtotal.quantize(CENTS)
    tax = (subtotal * policy.tax_rate).quantize(WHOLE, rounding=ROUND_HALF_UP).quantize(CENTS)
    if count == 0 or subtotal >= policy.free_delivery_threshold:
        fee = Decimal("0.00")
    else:
        fee = Decimal(policy.delivery_fee).quantize(CENTS)
    remaining = max(Decimal("0"), policy.free_delivery_threshold - subtotal).quantize(CENTS)
    return OrderTotals(
        item_count=count,
        subtotal=subtotal,
        tax=tax,
        delivery_fee=fee,
        total=(subtotal + tax + fee).quantize(CENTS),
        free_delivery_remaining=remaining,
    )


def cart_totals(items: Iterable[CartItemRecord], policy: PricingPolicy = DEFAULT_POLICY) -> OrderTotals:
    return compute_totals(((it.product.price, it.quantity) for it in items if it.product), policy)
