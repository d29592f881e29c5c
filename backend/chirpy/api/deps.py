"""API dependencies for authentication.

Routes receive the raw ``Authorization`` header value and hand it to the
session manager, which checks signature, expiry, issuer and the revocation
ledger. Core errors raised here are turned into HTTP responses by the
exception handlers in :mod:`chirpy.main`.
"""
from typing import Optional

from fastapi import Depends, Header

from chirpy.database import DocumentStore, get_db
from chirpy.exceptions import AuthenticationError
from chirpy.utils.jwt_utils import TokenService, get_token_service
from chirpy.utils.sessions import SessionManager


def get_session_manager(
    db: DocumentStore = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> SessionManager:
    return SessionManager(db, tokens)


def require_authorization(authorization: Optional[str] = Header(None)) -> str:
    """Return the raw Authorization header or fail with 401"""
    if not authorization:
        raise AuthenticationError("No authorization header")
    return authorization


def require_user(
    authorization: str = Depends(require_authorization),
    sessions: SessionManager = Depends(get_session_manager),
) -> int:
    """Require a valid, unrevoked access token and return its user id"""
    return sessions.authenticate(authorization)
