"""Shared pytest fixtures for the storefront tests."""

from decimal import Decimal

import pytest

from app import create_app
from storefront.config import AppConfig
from storefront.db.session import create_db_engine, init_db, make_session_scope
from storefront.storage import DatabaseStorage, MemoryStorage


ADMIN_EMAIL = "admin@example.com"


def make_config(**overrides) -> AppConfig:
    values = dict(
        database_url="sqlite://",
        secret_key="test-secret",
        log_level="ERROR",
        storage_backend="memory",
        currency="INR",
        tax_rate=Decimal("0.18"),
        free_delivery_threshold=Decimal("500"),
        delivery_fee=Decimal("50"),
        admin_emails=[ADMIN_EMAIL],
        auth_provider_url=None,
        demo_login=True,
    )
    values.update(overrides)
    return AppConfig(**values)


@pytest.fixture
def memory_storage():
    """Memory backend seeded with the demo catalog."""
    return MemoryStorage()


@pytest.fixture
def database_storage():
    """Database backend on a private in-memory SQLite database."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    storage = DatabaseStorage(make_session_scope(engine))
    storage.seed_demo_products()
    yield storage
    engine.dispose()


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Both backends, so each contract test runs twice."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def shopper(storage):
    return storage.upsert_user("user-1", {"email": "shopper@example.com", "first_name": "Asha"})


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def app(config, memory_storage):
    return create_app(config, storage=memory_storage)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, user_id, email):
    response = client.get("/api/login", query_string={"user_id": user_id, "email": email})
    assert response.status_code == 302
    return client


@pytest.fixture
def user_client(app):
    """Test client signed in as a regular shopper."""
    return _login(app.test_client(), "user-1", "shopper@example.com")


@pytest.fixture
def other_client(app):
    return _login(app.test_client(), "user-2", "neighbour@example.com")


def signed_in(app, user_id, email):
    """Client holding a provider-established session, as after an identity provider callback."""
    app.extensions["storefront_components"]["storage"].upsert_user(user_id, {"email": email})
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
    return client


@pytest.fixture
def admin_client(app):
    return signed_in(app, "admin-1", ADMIN_EMAIL)


@pytest.fixture
def checkout_payload():
    return {
        "orderData": {
            "deliveryAddress": {
                "firstName": "Asha",
                "lastName": "Rao",
                "street": "12 Market Road",
                "city": "Pune",
                "state": "Maharashtra",
                "pinCode": "411001",
            },
            "paymentMethod": "upi",
            "deliverySlot": "9am-12pm",
        }
    }
