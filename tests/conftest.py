import uuid

import pytest

from pizza_service import create_app, db
from pizza_service.metrics import metrics_registry

ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "toomanysecrets"


@pytest.fixture(scope='module')
def app():
    """
    Creates a test Flask application instance with testing-specific configuration.
    """
    config_overrides = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "METRICS_ENABLED": True,
        "METRICS_URL": "",
        "FACTORY_URL": "http://factory.test",
        "FACTORY_API_KEY": "test-factory-key",
        "ADMIN_NAME": "Test Admin",
        "ADMIN_EMAIL": ADMIN_EMAIL,
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
    }
    app = create_app(config_overrides)

    with app.app_context():
        engine = db.engine
        try:
            yield app
        finally:
            db.session.remove()
            db.drop_all()
            engine.dispose()


@pytest.fixture()
def client(app):
    """A test client for the app."""
    with app.app_context():
        yield app.test_client()


@pytest.fixture(autouse=True)
def reset_metrics():
    """Isolate the shared registry between tests."""
    metrics_registry.reset()
    yield
    metrics_registry.reset()


def random_email(prefix="diner"):
    return f"{prefix}_{uuid.uuid4().hex[:10]}@test.com"


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register_user(client):
    """Registers a fresh diner and returns ``(user, token, password)``."""

    def _register(name="pizza diner", password="a"):
        response = client.post(
            "/api/auth",
            json={"name": name, "email": random_email(), "password": password},
        )
        assert response.status_code == 200
        body = response.get_json()
        return body["user"], body["token"], password

    return _register


@pytest.fixture()
def admin_token(client):
    response = client.put(
        "/api/auth", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return response.get_json()["token"]
