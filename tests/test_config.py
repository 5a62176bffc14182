from decimal import Decimal

import pytest

from storefront import config as config_module
from storefront.config import load_env


ENV_KEYS = (
    "DATABASE_URL",
    "SECRET_KEY",
    "LOG_LEVEL",
    "STORAGE_BACKEND",
    "CURRENCY",
    "TAX_RATE",
    "FREE_DELIVERY_THRESHOLD",
    "DELIVERY_FEE",
    "ADMIN_EMAILS",
    "AUTH_PROVIDER_URL",
    "DEMO_LOGIN",
)


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setattr(config_module, "_load_settings_file", lambda: {})
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(env):
    cfg = load_env()

    assert cfg.storage_backend == "memory"
    assert cfg.currency == "INR"
    assert cfg.tax_rate == Decimal("0.18")
    assert cfg.free_delivery_threshold == Decimal("500")
    assert cfg.delivery_fee == Decimal("50")
    assert cfg.admin_emails == []
    assert cfg.auth_provider_url is None
    assert cfg.demo_login is False


def test_environment_overrides(env):
    env.setenv("STORAGE_BACKEND", "Database")
    env.setenv("CURRENCY", "usd")
    env.setenv("DELIVERY_FEE", "30")
    env.setenv("ADMIN_EMAILS", " Boss@Example.com, ops@example.com ,")
    env.setenv("LOG_LEVEL", "debug")
    env.setenv("DEMO_LOGIN", "true")

    cfg = load_env()

    assert cfg.storage_backend == "database"
    assert cfg.currency == "USD"
    assert cfg.delivery_fee == Decimal("30")
    assert cfg.admin_emails == ["boss@example.com", "ops@example.com"]
    assert cfg.log_level == "DEBUG"
    assert cfg.demo_login is True


def test_settings_file_wins(env):
    env.setenv("CURRENCY", "USD")
    env.setattr(config_module, "_load_settings_file", lambda: {"CURRENCY": "EUR"})

    assert load_env().currency == "EUR"


@pytest.mark.parametrize(
    "key,value",
    [
        ("STORAGE_BACKEND", "redis"),
        ("CURRENCY", "RUPEE"),
        ("TAX_RATE", "lots"),
        ("DELIVERY_FEE", "-5"),
        ("LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values_raise(env, key, value):
    env.setenv(key, value)

    with pytest.raises(ValueError):
        load_env()


def test_admin_check(env):
    env.setenv("ADMIN_EMAILS", "boss@example.com")
    cfg = load_env()

    assert cfg.is_admin_email("BOSS@example.com")
    assert not cfg.is_admin_email("shopper@example.com")
    assert not cfg.is_admin_email(None)
