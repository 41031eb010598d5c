import pytest
from typing import Generator
from fastapi.testclient import TestClient

from storefront import config
from storefront.app_setup.factory import create_app
from storefront.auth.service import hash_password
from storefront.payments import repository as orders_repository
from storefront.payments.gateway import DemoGateway
from storefront.products import repository as products_repository
from storefront.utils.rate_limit import InMemoryRateLimitStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"
JWT_SECRET = "test-jwt-secret-with-enough-entropy-0123456789"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def admin_credentials():
    return {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}

@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    # Coût minimal: les tests n'ont pas besoin d'un hash lent
    return hash_password(ADMIN_PASSWORD, rounds=4)

# Environnement isolé: pas de Supabase, pas de PayPal, admin et secret JWT connus
@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, admin_password_hash):
    monkeypatch.setattr(config, "SUPABASE_URL", "", raising=True)
    monkeypatch.setattr(config, "SUPABASE_ANON", "", raising=True)
    monkeypatch.setattr(config, "SUPABASE_SERVICE_KEY", "", raising=True)
    monkeypatch.setattr(config, "PAYPAL_CLIENT_ID", "", raising=True)
    monkeypatch.setattr(config, "PAYPAL_CLIENT_SECRET", "", raising=True)
    monkeypatch.setattr(config, "APP_ENV", "test", raising=True)
    monkeypatch.setattr(config, "COOKIE_SECURE", False, raising=True)
    monkeypatch.setattr(config, "JWT_SECRET", JWT_SECRET, raising=True)
    monkeypatch.setattr(config, "ADMIN_EMAIL", ADMIN_EMAIL, raising=True)
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", admin_password_hash, raising=True)
    monkeypatch.setattr(config, "RATE_LIMIT_REDIS_URL", "", raising=True)
    monkeypatch.setattr(config, "SESSION_SECRET_KEY", "", raising=True)
    monkeypatch.setattr(config, "FORWARDED_ALLOW_IPS", ["127.0.0.1"], raising=True)

# Stockages locaux remis à zéro entre chaque test
@pytest.fixture(autouse=True)
def _reset_local_state():
    products_repository.reset_local_catalog()
    orders_repository.reset_local_orders()
    yield
    products_repository.reset_local_catalog()
    orders_repository.reset_local_orders()

@pytest.fixture()
def rate_limit_store() -> InMemoryRateLimitStore:
    return InMemoryRateLimitStore()

@pytest.fixture()
def app(rate_limit_store):
    return create_app(payment_gateway=DemoGateway(production=False), rate_limit_store=rate_limit_store)

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture()
def admin_client(client) -> TestClient:
    """Client avec cookie admin_token posé par un vrai login."""
    resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return client
