"""Pytest configuration and fixtures for Wishwall tests.

Test isolation strategy:
- Each test gets its own SQLite database file, created from the ORM metadata
- The identity provider is the in-memory FakeIdentityProvider
- Outgoing email goes to FakeEmailClient and is inspected in memory
- Admin API tests log in through the real login route (admin_client)
"""

import os
from collections.abc import Generator
from pathlib import Path

os.environ.setdefault("WISHWALL_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_SESSION_SECRET", "test-admin-session-secret-0123456789abcdef")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from tests.helpers import (
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    VIEWER_EMAIL,
    VIEWER_PASSWORD,
    create_sqlite_engine,
    login,
)
from wishwall.app import add_request_id_middleware, create_app
from wishwall.auth.provider import FakeIdentityProvider, Identity
from wishwall.config import clear_settings_cache
from wishwall.db.session import create_session_factory
from wishwall.email.client import FakeEmailClient


@pytest.fixture
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Provide an engine on a per-test database with the schema created."""
    engine = create_sqlite_engine(tmp_path / "wishwall.db")
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Provide a database session on the per-test database.

    Data must be committed before it is visible to requests made via client.
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def admin_user(fake_provider: FakeIdentityProvider) -> Identity:
    """An identity with the admin role in app_metadata."""
    return fake_provider.add_user(
        ADMIN_EMAIL, ADMIN_PASSWORD, app_metadata={"role": "admin"}
    )


@pytest.fixture
def viewer_user(fake_provider: FakeIdentityProvider) -> Identity:
    """An identity with no admin claim in either metadata bag."""
    return fake_provider.add_user(
        VIEWER_EMAIL, VIEWER_PASSWORD, user_metadata={"username": "viewer"}, app_metadata={}
    )


@pytest.fixture
def email_client() -> FakeEmailClient:
    return FakeEmailClient()


@pytest.fixture
def app(
    fake_provider: FakeIdentityProvider,
    email_client: FakeEmailClient,
    session_factory: sessionmaker[Session],
) -> FastAPI:
    """Provide the full app wired to the fakes and the per-test database."""
    app = create_app(
        identity_provider=fake_provider,
        email_client=email_client,
        session_factory=session_factory,
    )
    add_request_id_middleware(app, log_requests=False)
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Provide a test client with no session cookie."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_client(client: TestClient, admin_user: Identity) -> TestClient:
    """Provide a test client holding a valid admin session cookie."""
    response = login(client, "admin", ADMIN_PASSWORD)
    assert response.status_code == 200, response.text
    return client


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset the settings cache before each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
