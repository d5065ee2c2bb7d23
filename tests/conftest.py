import os
from pathlib import Path

import pytest

os.environ["STOREFRONT_ENV"] = "test"
os.environ.setdefault("SESSION_SECRET", "test-session-secret")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain():
    """Initialize the storefront domain once per session."""
    from shared.domain import init_domain

    return init_domain()


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, reset the memory provider after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    ctx.pop()


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr("identity.account.passwords.BCRYPT_ROUNDS", 4)


@pytest.fixture(autouse=True)
def stores():
    """Fresh in-memory repositories for every test."""
    from shared.config import get_settings
    from shared.stores import memory_stores, reset_stores, set_stores

    get_settings.cache_clear()
    stores = memory_stores()
    set_stores(stores)

    yield stores

    reset_stores()


@pytest.fixture(autouse=True)
def gateway():
    from payments.gateway import reset_gateway, set_gateway
    from payments.gateway.fake_adapter import FakeGateway

    gateway = FakeGateway()
    set_gateway(gateway)

    yield gateway

    reset_gateway()


@pytest.fixture(autouse=True)
def mailer():
    from identity.mail import reset_mailer, set_mailer
    from identity.mail.fake_email import FakeEmailAdapter

    mailer = FakeEmailAdapter()
    set_mailer(mailer)

    yield mailer

    reset_mailer()


@pytest.fixture(autouse=True)
def invoice_store():
    from payments.invoice.storage import MemoryInvoiceStore, reset_invoice_store, set_invoice_store

    store = MemoryInvoiceStore()
    set_invoice_store(store)

    yield store

    reset_invoice_store()


@pytest.fixture()
def buyer():
    from identity.principal import AuthenticatedUser

    return AuthenticatedUser(user_id="user-buyer", email="buyer@example.com")


@pytest.fixture()
def seller():
    from identity.principal import AuthenticatedUser

    return AuthenticatedUser(user_id="user-seller", email="seller@example.com")


@pytest.fixture()
def mongo_db():
    """A throwaway mongomock database with the storefront indexes."""
    import mongomock
    from shared.database import setup_db

    db = mongomock.MongoClient(tz_aware=True)["storefront_test"]
    setup_db(db)
    return db


@pytest.fixture()
def make_client():
    """Build TestClients with their own cookie jars, optionally logged in as a fresh user."""
    from app import app
    from fastapi.testclient import TestClient

    clients = []

    def _make(email=None, password="secret123"):
        client = TestClient(app)
        clients.append(client)
        if email is not None:
            response = client.post(
                "/signup", json={"email": email, "password": password, "confirm_password": password}
            )
            assert response.status_code == 201, response.text
            response = client.post("/login", json={"email": email, "password": password})
            assert response.status_code == 200, response.text
            client.user_id = response.json()["user_id"]
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture()
def client(make_client):
    return make_client()
