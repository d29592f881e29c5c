"""Token refresh and revocation endpoints"""
from fastapi import APIRouter, Depends, Response, status

from chirpy.api.deps import get_session_manager, require_authorization
from chirpy.schemas.token import RefreshResponse
from chirpy.utils.sessions import SessionManager

router = APIRouter(prefix="/api", tags=["authentication"])


@router.post("/refresh", response_model=RefreshResponse)
def refresh_token(
    authorization: str = Depends(require_authorization),
    sessions: SessionManager = Depends(get_session_manager),
) -> RefreshResponse:
    """Exchange `Authorization: Bearer <refresh token>` for a new access token.

    Each refresh token works once; a second exchange returns 401.
    """
    return RefreshResponse(token=sessions.refresh(authorization))


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke_token(
    authorization: str = Depends(require_authorization),
    sessions: SessionManager = Depends(get_session_manager),
) -> Response:
    """Revoke the bearer token (access or refresh). Any later use returns 401."""
    sessions.revoke(authorization)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
