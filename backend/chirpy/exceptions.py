"""Domain exceptions raised by the document store, token service and session flow.

These never import FastAPI; ``chirpy.main`` maps them onto HTTP responses.
"""
from typing import Union


class ChirpyError(Exception):
    """Base class for all Chirpy errors"""


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class StoreError(ChirpyError):
    """The backing document could not be used"""


class StoreIOError(StoreError):
    """The backing file could not be read or written"""


class FormatError(StoreError):
    """The backing file does not hold a valid serialized document"""


# ---------------------------------------------------------------------------
# Lookups and conflicts
# ---------------------------------------------------------------------------

class NotFoundError(ChirpyError):
    """A user or chirp with the given key does not exist"""

    def __init__(self, entity: str, key: Union[int, str]) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConflictError(ChirpyError):
    """A uniqueness rule would be violated"""


class DuplicateEmailError(ConflictError):
    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already registered: {email}")


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

class AuthenticationError(ChirpyError):
    """Bad credentials, or a token that is malformed, expired, mis-issued or revoked"""


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class ValidationError(ChirpyError):
    """Caller-supplied data is not acceptable"""


class ChirpTooLongError(ValidationError):
    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__("Chirp is too long")
