import pytest
from fastapi.testclient import TestClient

from ella_rises.auth import session_token
from ella_rises.core.config import load_settings
from ella_rises.database import ensure_schema
from ella_rises.main import create_app


@pytest.fixture
def settings():
    return load_settings({'DATABASE_URL': 'sqlite://', 'SESSION_SECRET': 'test-secret'})


@pytest.fixture
def app(settings):
    application = create_app(settings)
    ensure_schema(application.state.engine)
    return application


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def manager_client(client):
    response = client.post(
        '/login',
        data={'email': 'admin@test.com', 'password': 'pass'},
        follow_redirects=False,
    )
    assert response.status_code == 302
    return client


@pytest.fixture
def staff_client(app, client, settings):
    app.state.session_store.save('staff-sid', {'user': {'id': 2, 'email': 'staff@test.com', 'role': 'staff'}})
    client.cookies.set(
        settings.session_cookie_name,
        session_token.create_session_token('staff-sid', settings.session_secret, 1),
    )
    return client
