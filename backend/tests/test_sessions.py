"""Tests for login, single-use refresh and revocation"""
import threading

import pytest

from chirpy.database import DocumentStore
from chirpy.exceptions import AuthenticationError
from chirpy.utils.jwt_utils import TokenService
from chirpy.utils.sessions import SessionManager


@pytest.fixture
def user(db: DocumentStore):
    return db.create_user("a@example.com", "secret")


def test_login_issues_token_pair(sessions: SessionManager, token_service: TokenService, user):
    logged_in, pair = sessions.login("a@example.com", "secret")

    assert logged_in.id == user.id
    assert token_service.validate_access_token(f"Bearer {pair.access_token}") == user.id
    assert token_service.validate_refresh_token(f"Bearer {pair.refresh_token}")[0] == user.id


def test_login_bad_password(sessions: SessionManager, user):
    with pytest.raises(AuthenticationError):
        sessions.login("a@example.com", "nope")


def test_refresh_returns_new_access_token(sessions: SessionManager, token_service: TokenService, user):
    refresh = token_service.create_refresh_token(user.id)

    access = sessions.refresh(f"Bearer {refresh}")

    assert token_service.validate_access_token(f"Bearer {access}") == user.id


def test_refresh_token_is_single_use(sessions: SessionManager, token_service: TokenService, user):
    """Test that a refresh token exchanged once fails on the second exchange"""
    header = f"Bearer {token_service.create_refresh_token(user.id)}"
    sessions.refresh(header)

    with pytest.raises(AuthenticationError):
        sessions.refresh(header)


def test_refresh_revokes_presented_token(sessions: SessionManager, token_service: TokenService, db: DocumentStore, user):
    refresh = token_service.create_refresh_token(user.id)
    sessions.refresh(f"Bearer {refresh}")
    assert db.is_token_revoked(refresh) is True


def test_refresh_rejects_access_token(sessions: SessionManager, token_service: TokenService, user):
    with pytest.raises(AuthenticationError):
        sessions.refresh(f"Bearer {token_service.create_access_token(user.id)}")


def test_refresh_rejects_expired_token(sessions: SessionManager, stale_token_service: TokenService, user):
    with pytest.raises(AuthenticationError):
        sessions.refresh(f"Bearer {stale_token_service.create_refresh_token(user.id)}")


def test_refresh_unknown_user_still_consumes_token(
    sessions: SessionManager, token_service: TokenService, db: DocumentStore
):
    """Test that the token is revoked before the user lookup fails"""
    refresh = token_service.create_refresh_token(404)

    with pytest.raises(AuthenticationError):
        sessions.refresh(f"Bearer {refresh}")

    assert db.is_token_revoked(refresh) is True


def test_refresh_fails_closed_when_store_unreadable(sessions: SessionManager, token_service: TokenService, db: DocumentStore, user):
    refresh = token_service.create_refresh_token(user.id)
    with open(db.path, "w") as fh:
        fh.write("garbage")

    with pytest.raises(AuthenticationError):
        sessions.refresh(f"Bearer {refresh}")


def test_revoke_accepts_any_bearer_string(sessions: SessionManager, db: DocumentStore):
    sessions.revoke("Bearer not-even-a-jwt")
    assert db.is_token_revoked("not-even-a-jwt") is True


def test_revoke_requires_bearer_token(sessions: SessionManager):
    with pytest.raises(AuthenticationError):
        sessions.revoke("Bearer ")


def test_revoked_refresh_token_cannot_be_exchanged(sessions: SessionManager, token_service: TokenService, user):
    header = f"Bearer {token_service.create_refresh_token(user.id)}"
    sessions.revoke(header)

    with pytest.raises(AuthenticationError):
        sessions.refresh(header)


def test_authenticate_honors_revocation(sessions: SessionManager, token_service: TokenService, user):
    header = f"Bearer {token_service.create_access_token(user.id)}"
    assert sessions.authenticate(header) == user.id

    sessions.revoke(header)

    with pytest.raises(AuthenticationError):
        sessions.authenticate(header)


def test_concurrent_refresh_exchanges_token_once(sessions: SessionManager, token_service: TokenService, user):
    """Test that racing exchanges of one refresh token yield exactly one access token"""
    header = f"Bearer {token_service.create_refresh_token(user.id)}"
    workers = 8
    barrier = threading.Barrier(workers)
    results = []
    results_lock = threading.Lock()

    def exchange():
        barrier.wait()
        try:
            sessions.refresh(header)
            outcome = "ok"
        except AuthenticationError:
            outcome = "rejected"
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=exchange) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("rejected") == workers - 1
