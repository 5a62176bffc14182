import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from ..errors import ValidationError


CATEGORIES = ("leafy", "root", "seasonal", "organic", "exotic", "herbs")
ORDER_STATUSES = ("pending", "processing", "delivered", "cancelled")
PAYMENT_METHODS = ("card", "upi", "cash")
PAYMENT_ALIASES = {"cod": "cash", "cash on delivery": "cash", "credit/debit card": "card"}
ADDRESS_FIELDS = {
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "street": "Street address is required",
    "city": "City is required",
    "state": "State is required",
}
PIN_CODE_RE = re.compile(r"^\d{6}$")
MAX_SLOT_LENGTH = 64
# Numeric(12, 2) columns hold ten integer digits
MAX_MONEY = Decimal(10) ** 10
MAX_INTEGER = 2**31 - 1


def ensure_positive_int(value: Any, field: str, *, allow_zero: bool = False) -> int:
    if isinstance(value, bool):
        raise ValidationError.for_field(field, f"{field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError.for_field(field, f"{field} must be an integer")
    if isinstance(value, float) and value != number:
        raise ValidationError.for_field(field, f"{field} must be an integer")
    floor = 0 if allow_zero else 1
    if number < floor:
        raise ValidationError.for_field(field, f"{field} must be >= {floor}")
    if number > MAX_INTEGER:
        raise ValidationError.for_field(field, f"{field} must be <= {MAX_INTEGER}")
    return number


def ensure_money(value: Any, field: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError.for_field(field, f"{field} must be a number")
    if not amount.is_finite() or amount < 0:
        raise ValidationError.for_field(field, f"{field} must be >= 0")
    if amount >= MAX_MONEY:
        raise ValidationError.for_field(field, f"{field} must be below {MAX_MONEY}")
    return amount.quantize(Decimal("0.01"))


def validate_delivery_address(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        raise ValidationError.for_field("deliveryAddress", "Delivery address is required")
    errors: Dict[str, str] = {}
    address: Dict[str, str] = {}
    for key, message in ADDRESS_FIELDS.items():
        value = str(raw.get(key) or "").strip()
        if not value:
            errors[f"deliveryAddress.{key}"] = message
        address[key] = value
    pin = str(raw.get("pinCode") or "").strip()
    if not PIN_CODE_RE.match(pin):
        errors["deliveryAddress.pinCode"] = "PIN code must be 6 digits"
    address["pinCode"] = pin
    if errors:
        raise ValidationError("Invalid delivery address", errors)
    return address


def validate_payment_method(raw: Any) -> str:
    value = str(raw or "").strip().lower()
    value = PAYMENT_ALIASES.get(value, value)
    if value not in PAYMENT_METHODS:
        raise ValidationError.for_field("paymentMethod", f"Payment method must be one of {', '.join(PAYMENT_METHODS)}")
    return value


def validate_delivery_slot(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    value = str(raw).strip()
    if not value:
        return None
    if len(value) > MAX_SLOT_LENGTH:
        raise ValidationError.for_field("deliverySlot", f"Delivery slot must be at most {MAX_SLOT_LENGTH} characters")
    return value


def validate_order_status(raw: Any) -> str:
    value = str(raw or "").strip().lower()
    if value not in ORDER_STATUSES:
        raise ValidationError.for_field("status", f"Status must be one of {', '.join(ORDER_STATUSES)}")
    return value


def _string_list(value: Any, field: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError.for_field(field, f"{field} must be a list of strings")
    return [v.strip() for v in value if v.strip()]


def validate_product_payload(raw: Any, *, partial: bool = False) -> Dict[str, Any]:
    """Map a camelCase product payload to storage fields.

    With partial=True only the keys present are validated, for updates.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Product payload must be a JSON object")
    errors: Dict[str, str] = {}
    fields: Dict[str, Any] = {}

    def present(key: str) -> bool:
        return key in raw and (not partial or raw[key] is not None)

    def run(key: str, fn):
        try:
            return fn()
        except ValidationError as exc:
            errors.update(exc.errors or {key: exc.message})
            return None

    if present("name") or not partial:
        name = str(raw.get("name") or "").strip()
        if not name:
            errors["name"] = "Name is required"
        fields["name"] = name
    if present("category") or not partial:
        category = str(raw.get("category") or "").strip().lower()
        if category not in CATEGORIES:
            errors["category"] = f"Category must be one of {', '.join(CATEGORIES)}"
        fields["category"] = category
    if present("price") or not partial:
        fields["price"] = run("price", lambda: ensure_money(raw.get("price"), "price"))
    if "originalPrice" in raw:
        original = raw.get("originalPrice")
        fields["original_price"] = (
            None if original in (None, "") else run("originalPrice", lambda: ensure_money(original, "originalPrice"))
        )
    if "description" in raw:
        fields["description"] = (str(raw.get("description") or "").strip() or None)
    if "imageUrl" in raw:
        fields["image_url"] = (str(raw.get("imageUrl") or "").strip() or None)
    if present("cutStyles"):
        fields["cut_styles"] = run("cutStyles", lambda: _string_list(raw.get("cutStyles"), "cutStyles"))
    elif not partial:
        fields["cut_styles"] = []
    if present("freshnessDays"):
        fields["freshness_days"] = run(
            "freshnessDays", lambda: ensure_positive_int(raw.get("freshnessDays"), "freshnessDays")
        )
    if present("stock") or not partial:
        fields["stock"] = run("stock", lambda: ensure_positive_int(raw.get("stock", 0), "stock", allow_zero=True))
    if present("isOrganic"):
        fields["is_organic"] = bool(raw.get("isOrganic"))
    if present("isActive"):
        fields["is_active"] = bool(raw.get("isActive"))
    if "nutritionInfo" in raw:
        info = raw.get("nutritionInfo")
        if info is not None and not isinstance(info, dict):
            errors["nutritionInfo"] = "nutritionInfo must be an object"
        else:
            fields["nutrition_info"] = {str(k): str(v) for k, v in info.items()} if info else None

    if errors:
        raise ValidationError("Invalid product", errors)
    return fields
