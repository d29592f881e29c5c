"""Polka billing webhook"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status

from chirpy.config import settings
from chirpy.database import DocumentStore, get_db
from chirpy.exceptions import AuthenticationError
from chirpy.schemas.webhook import USER_UPGRADED_EVENT, PolkaEvent
from chirpy.utils.auth import extract_api_key
from chirpy.utils.logger import logger

router = APIRouter(prefix="/api/polka", tags=["webhooks"])


def require_polka_key(authorization: Optional[str] = Header(None)) -> None:
    """Check `Authorization: ApiKey <POLKA_API_KEY>`"""
    if not settings.POLKA_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Polka webhooks are not configured",
        )
    if extract_api_key(authorization or "") != settings.POLKA_API_KEY:
        raise AuthenticationError("Invalid API key")


@router.post("/webhooks", status_code=status.HTTP_204_NO_CONTENT)
def polka_webhook(
    event: PolkaEvent,
    db: DocumentStore = Depends(get_db),
    _: None = Depends(require_polka_key),
) -> Response:
    """
    Receive a billing event

    ``user.upgraded`` marks the user as Chirpy Red (404 if the user does not
    exist). Other events are acknowledged and ignored.
    """
    if event.event == USER_UPGRADED_EVENT:
        db.upgrade_user(event.data.user_id)
    else:
        logger.info(f"Ignoring Polka event {event.event}", extra={"action": "polka_webhook"})

    return Response(status_code=status.HTTP_204_NO_CONTENT)
