from typing import Dict, List
from ..services.pricing import OrderTotals
from ..storage.records import CartItemRecord


def to_cart_dto(items: List[CartItemRecord], totals: OrderTotals, currency: str) -> Dict:
    return {
        "items": [it.to_dict() for it in items],
        "summary": totals.to_dict(),
        "currency": currency,
    }
