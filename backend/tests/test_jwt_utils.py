"""Tests for access/refresh token issuance and validation"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from chirpy.exceptions import AuthenticationError
from chirpy.utils.jwt_utils import ACCESS_ISSUER, REFRESH_ISSUER, TokenService


def bearer(token: str) -> str:
    return f"Bearer {token}"


def test_access_token_round_trip(token_service: TokenService):
    token = token_service.create_access_token(7)
    assert token_service.validate_access_token(bearer(token)) == 7


def test_access_token_claims(token_service: TokenService):
    token = token_service.create_access_token(7)
    claims = jwt.get_unverified_claims(token)

    assert claims["iss"] == ACCESS_ISSUER
    assert claims["sub"] == "7"
    assert claims["exp"] - claims["iat"] == 3600
    assert claims["jti"]


def test_refresh_token_claims(token_service: TokenService):
    token = token_service.create_refresh_token(7)
    claims = jwt.get_unverified_claims(token)

    assert claims["iss"] == REFRESH_ISSUER
    assert claims["exp"] - claims["iat"] == 60 * 24 * 3600


def test_tokens_are_unique(token_service: TokenService):
    assert token_service.create_refresh_token(1) != token_service.create_refresh_token(1)


def test_refresh_token_round_trip(token_service: TokenService):
    token = token_service.create_refresh_token(7)
    assert token_service.validate_refresh_token(bearer(token)) == (7, token)


def test_access_token_expired(stale_token_service: TokenService, token_service: TokenService):
    """Test that an access token past its expiry is rejected"""
    token = stale_token_service.create_access_token(7)

    with pytest.raises(AuthenticationError):
        token_service.validate_access_token(bearer(token))


def test_refresh_token_expired(stale_token_service: TokenService, token_service: TokenService):
    token = stale_token_service.create_refresh_token(7)

    with pytest.raises(AuthenticationError):
        token_service.validate_refresh_token(bearer(token))


def test_access_token_expires_after_configured_ttl():
    """Test that a custom TTL is honored: a 1-second token issued 5 seconds ago is dead"""
    issued = TokenService(
        secret="s",
        access_ttl=timedelta(seconds=1),
        clock=lambda: datetime.now(timezone.utc) - timedelta(seconds=5),
    ).create_access_token(7)

    with pytest.raises(AuthenticationError):
        TokenService(secret="s").validate_access_token(bearer(issued))


def test_refresh_token_rejected_as_access(token_service: TokenService):
    token = token_service.create_refresh_token(7)
    with pytest.raises(AuthenticationError):
        token_service.validate_access_token(bearer(token))


def test_access_token_rejected_as_refresh(token_service: TokenService):
    token = token_service.create_access_token(7)
    with pytest.raises(AuthenticationError):
        token_service.validate_refresh_token(bearer(token))


def test_wrong_secret_rejected(token_service: TokenService):
    token = TokenService(secret="another-secret").create_access_token(7)
    with pytest.raises(AuthenticationError):
        token_service.validate_access_token(bearer(token))


def test_tampered_token_rejected(token_service: TokenService):
    token = token_service.create_access_token(7)
    header, payload, signature = token.split(".")
    forged = ".".join([header, payload, signature[::-1]])

    with pytest.raises(AuthenticationError):
        token_service.validate_access_token(bearer(forged))


@pytest.mark.parametrize("header", ["", "Token abc", "bearer abc", "Bearer ", "Bearer not-a-jwt"])
def test_malformed_header_rejected(token_service: TokenService, header: str):
    with pytest.raises(AuthenticationError):
        token_service.validate_access_token(header)


def test_non_numeric_subject_rejected(token_service: TokenService):
    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode(
        {"iss": ACCESS_ISSUER, "sub": "admin", "iat": now, "exp": now + 60},
        "test-secret",
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        token_service.validate_access_token(bearer(token))


def test_issue_token_pair(token_service: TokenService):
    pair = token_service.issue_token_pair(3)
    assert token_service.validate_access_token(bearer(pair.access_token)) == 3
    assert token_service.validate_refresh_token(bearer(pair.refresh_token))[0] == 3


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        TokenService(secret="")


@pytest.mark.parametrize("subject", ["²", "٣", "-1", ""])
def test_non_ascii_digit_subject_rejected(token_service: TokenService, subject: str):
    """Test that only plain ASCII digit subjects resolve to a user id"""
    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode(
        {"iss": ACCESS_ISSUER, "sub": subject, "iat": now, "exp": now + 60},
        "test-secret",
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        token_service.validate_access_token(bearer(token))
