"""Authentication utilities — password hashing and Authorization header parsing"""
from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

from chirpy.exceptions import AuthenticationError

BEARER_PREFIX = "Bearer "
API_KEY_PREFIX = "ApiKey "

_hasher = PasswordHasher(type=Type.ID)


def hash_password(password: str) -> str:
    """Hash a password with argon2id (random salt per call)"""
    return _hasher.hash(password)


def verify_password_hash(password_hash: str, password: str) -> bool:
    """
    Check a raw password against a stored hash

    Args:
        password_hash: Hash produced by :func:`hash_password`
        password: Raw password to verify

    Returns:
        True on match, False on mismatch or an unparseable hash
    """
    try:
        return _hasher.verify(password_hash, password)
    except (InvalidHashError, VerificationError):
        return False


def _strip_prefix(header: str, prefix: str) -> str:
    if not header or not header.startswith(prefix):
        raise AuthenticationError(f"Authorization header must start with '{prefix.strip()}'")
    value = header[len(prefix):].strip()
    if not value:
        raise AuthenticationError("No token provided")
    return value


def extract_bearer_token(header: str) -> str:
    """Return the raw token from an ``Authorization: Bearer <token>`` value"""
    return _strip_prefix(header, BEARER_PREFIX)


def extract_api_key(header: str) -> str:
    """Return the key from an ``Authorization: ApiKey <key>`` value"""
    return _strip_prefix(header, API_KEY_PREFIX)
