"""Pytest configuration and fixtures"""
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from chirpy.database import DocumentStore, get_db
from chirpy.main import app
from chirpy.middleware.monitoring import fileserver_hits
from chirpy.middleware.rate_limit import limiter
from chirpy.utils.jwt_utils import TokenService, get_token_service
from chirpy.utils.sessions import SessionManager

TEST_JWT_SECRET = "test-secret"


@pytest.fixture(scope="function")
def db(tmp_path) -> DocumentStore:
    """Create a fresh database file for each test"""
    return DocumentStore(str(tmp_path / "database.json"))


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_JWT_SECRET)


@pytest.fixture
def sessions(db: DocumentStore, token_service: TokenService) -> SessionManager:
    return SessionManager(db, token_service)


@pytest.fixture(scope="function")
def client(db: DocumentStore, token_service: TokenService) -> Generator[TestClient, None, None]:
    """Create test client wired to the per-test database and token service"""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_token_service] = lambda: token_service
    limiter.enabled = False
    fileserver_hits.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def sample_user_data() -> dict:
    """Sample registration payload"""
    return {"email": "walt@breakingbad.com", "password": "04234"}


@pytest.fixture
def registered_user(client: TestClient, sample_user_data: dict) -> dict:
    """Register the sample user and log in; returns the login response body"""
    client.post("/api/users", json=sample_user_data)
    response = client.post("/api/login", json=sample_user_data)
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def auth_headers(registered_user: dict) -> dict:
    """Access-token headers for the registered sample user"""
    return {"Authorization": f"Bearer {registered_user['token']}"}


@pytest.fixture
def stale_token_service() -> TokenService:
    """Token service whose clock runs 61 days behind, so everything it issues is already expired"""
    return TokenService(
        secret=TEST_JWT_SECRET,
        clock=lambda: datetime.now(timezone.utc) - timedelta(days=61),
    )
