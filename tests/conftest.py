"""Shared fixtures: a testing app on in-memory SQLite plus helpers for accounts."""

import pytest

from app import create_app
from backend import create_backend_client
from extensions import db
from utils.services import PortfolioServices, UserRoleService

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'secret123'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def cached_app():
    """Testing app with a real in-process cache instead of NullCache."""
    app = create_app('testing', {'CACHE_TYPE': 'SimpleCache'})
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def backend(app):
    """Script-style client: the caller is whoever last signed in through it."""
    backend = create_backend_client(app.config).initialize()
    yield backend
    backend.shutdown()


@pytest.fixture
def services(backend):
    return PortfolioServices(backend)


@pytest.fixture
def make_account(backend):
    def _make(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, admin=True):
        user = backend.auth.sign_up(email, password)
        if admin:
            UserRoleService(backend).grant(user.uid)
        return user
    return _make


def login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return client.post('/admin/login', data={'email': email, 'password': password})


@pytest.fixture
def admin_user(make_account):
    return make_account()


@pytest.fixture
def admin_client(client, admin_user):
    response = login(client)
    assert response.status_code == 302
    return client
