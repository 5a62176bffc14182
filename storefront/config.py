import json
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


ROOT_DIR = Path(__file__).resolve().parents[1]
STORAGE_BACKENDS = {"memory", "database"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass
class AppConfig:
    database_url: str
    secret_key: str
    log_level: str
    storage_backend: str
    currency: str
    tax_rate: Decimal
    free_delivery_threshold: Decimal
    delivery_fee: Decimal
    admin_emails: List[str] = field(default_factory=list)
    auth_provider_url: Optional[str] = None
    demo_login: bool = False

    def is_admin_email(self, email: Optional[str]) -> bool:
        if not self.admin_emails:
            return True
        return bool(email) and email.strip().lower() in self.admin_emails


def validate_currency(value: Optional[str]) -> str:
    v = (value or "INR").strip().upper()
    if len(v) != 3:
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


def validate_storage_backend(value: Optional[str]) -> str:
    v = (value or "memory").strip().lower()
    if v not in STORAGE_BACKENDS:
        raise ValueError(f"Invalid STORAGE_BACKEND: {v!r}, expected one of {sorted(STORAGE_BACKENDS)}")
    return v


def validate_log_level(value: Optional[str]) -> str:
    v = (value or "INFO").strip().upper()
    if v not in LOG_LEVELS:
        raise ValueError(f"Invalid LOG_LEVEL: {v!r}")
    return v


def _decimal(value, name: str, default: str) -> Decimal:
    raw = default if value in (None, "") else str(value)
    try:
        d = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number") from exc
    if d < 0:
        raise ValueError(f"{name} must be >= 0")
    return d


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def _email_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(",")
    return [e.strip().lower() for e in items if e and e.strip()]


def _load_settings_file() -> dict:
    path = ROOT_DIR / "data" / "settings.json"
    if not path.exists():
        return {}
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("data/settings.json must contain a JSON object")
    return payload


def load_env() -> AppConfig:
    # data/settings.json wins, environment variables are the fallback
    load_dotenv(ROOT_DIR / ".env", override=False)
    s = _load_settings_file()

    def get(key: str, default: Optional[str] = None):
        value = s.get(key)
        if value in (None, ""):
            value = os.getenv(key, default)
        return value

    return AppConfig(
        database_url=get("DATABASE_URL", "sqlite:///data/app.db"),
        secret_key=get("SECRET_KEY", "dev_secret"),
        log_level=validate_log_level(get("LOG_LEVEL")),
        storage_backend=validate_storage_backend(get("STORAGE_BACKEND")),
        currency=validate_currency(get("CURRENCY")),
        tax_rate=_decimal(get("TAX_RATE"), "TAX_RATE", "0.18"),
        free_delivery_threshold=_decimal(get("FREE_DELIVERY_THRESHOLD"), "FREE_DELIVERY_THRESHOLD", "500"),
        delivery_fee=_decimal(get("DELIVERY_FEE"), "DELIVERY_FEE", "50"),
        admin_emails=_email_list(get("ADMIN_EMAILS")),
        auth_provider_url=(get("AUTH_PROVIDER_URL") or None),
        demo_login=_flag(get("DEMO_LOGIN")),
    )
