"""Plain records returned by every storage backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional


def money(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


def timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() + "Z" if value else None


@dataclass
class UserRecord:
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        if name:
            return name
        if self.email:
            return self.email.split("@")[0]
        return self.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImageUrl": self.profile_image_url,
            "createdAt": timestamp(self.created_at),
            "updatedAt": timestamp(self.updated_at),
        }


@dataclass
class ProductRecord:
    id: str
    name: str
    category: str
    price: Decimal
    description: Optional[str] = None
    original_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    cut_styles: List[str] = field(default_factory=list)
    freshness_days: int = 3
    is_organic: bool = False
    nutrition_info: Optional[Dict[str, str]] = None
    is_active: bool = True
    stock: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": money(self.price),
            "originalPrice": money(self.original_price),
            "imageUrl": self.image_url,
            "cutStyles": list(self.cut_styles or []),
            "freshnessDays": self.freshness_days,
            "isOrganic": self.is_organic,
            "nutritionInfo": dict(self.nutrition_info) if self.nutrition_info else None,
            "isActive": self.is_active,
            "stock": self.stock,
            "createdAt": timestamp(self.created_at),
            "updatedAt": timestamp(self.updated_at),
        }


@dataclass
class CartItemRecord:
    id: str
    user_id: str
    product_id: str
    quantity: int
    cut_style: str
    created_at: Optional[datetime] = None
    product: Optional[ProductRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "cutStyle": self.cut_style,
            "createdAt": timestamp(self.created_at),
            "product": self.product.to_dict() if self.product else None,
        }


@dataclass
class NewOrder:
    """Order header handed to Storage.create_order."""

    user_id: str
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total_amount: Decimal
    currency: str
    delivery_address: Dict[str, str]
    payment_method: str
    delivery_slot: Optional[str] = None
    payment_status: str = "pending"
    status: str = "pending"


@dataclass
class NewOrderItem:
    product_id: str
    quantity: int
    cut_style: str
    price: Decimal


@dataclass
class OrderItemRecord:
    id: str
    order_id: str
    product_id: str
    product_name: str
    quantity: int
    cut_style: str
    price: Decimal
    created_at: Optional[datetime] = None
    product: Optional[ProductRecord] = None

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.price) * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "orderId": self.order_id,
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "cutStyle": self.cut_style,
            "price": money(self.price),
            "createdAt": timestamp(self.created_at),
            "product": self.product.to_dict() if self.product else None,
        }


@dataclass
class OrderRecord:
    id: str
    user_id: str
    status: str
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total_amount: Decimal
    currency: str
    delivery_address: Dict[str, str]
    payment_method: str
    payment_status: str
    delivery_slot: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    order_items: List[OrderItemRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "status": self.status,
            "subtotal": money(self.subtotal),
            "tax": money(self.tax),
            "deliveryFee": money(self.delivery_fee),
            "totalAmount": money(self.total_amount),
            "currency": self.currency,
            "deliveryAddress": dict(self.delivery_address),
            "deliverySlot": self.delivery_slot,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "createdAt": timestamp(self.created_at),
            "updatedAt": timestamp(self.updated_at),
            "orderItems": [it.to_dict() for it in self.order_items],
        }


@dataclass
class WishlistRecord:
    id: str
    user_id: str
    product_id: str
    created_at: Optional[datetime] = None
    product: Optional[ProductRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "productId": self.product_id,
            "createdAt": timestamp(self.created_at),
            "product": self.product.to_dict() if self.product else None,
        }
