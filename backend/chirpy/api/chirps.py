"""Chirp endpoints"""
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Response, status

from chirpy.api.deps import require_user
from chirpy.config import settings
from chirpy.database import DocumentStore, get_db
from chirpy.exceptions import ChirpTooLongError
from chirpy.schemas.chirp import ChirpCreate, ChirpResponse
from chirpy.utils.logger import logger
from chirpy.utils.profanity import clean_chirp_body

router = APIRouter(prefix="/api/chirps", tags=["chirps"])


@router.get("", response_model=List[ChirpResponse])
def list_chirps(
    author_id: int = 0,
    sort: Literal["asc", "desc"] = "asc",
    db: DocumentStore = Depends(get_db),
):
    """
    List chirps

    Query parameters:
    - author_id: only this author's chirps (0 = everyone)
    - sort: asc or desc by id
    """
    return [ChirpResponse.model_validate(c) for c in db.get_chirps(author_id, sort)]


@router.post("", response_model=ChirpResponse, status_code=status.HTTP_201_CREATED)
def create_chirp(
    data: ChirpCreate,
    user_id: int = Depends(require_user),
    db: DocumentStore = Depends(get_db),
):
    """Post a chirp as the authenticated user. Banned words are masked."""
    if len(data.body) > settings.CHIRP_MAX_LENGTH:
        raise ChirpTooLongError(len(data.body), settings.CHIRP_MAX_LENGTH)

    chirp = db.create_chirp(clean_chirp_body(data.body), user_id)
    return ChirpResponse.model_validate(chirp)


@router.get("/{chirp_id}", response_model=ChirpResponse)
def get_chirp(chirp_id: int, db: DocumentStore = Depends(get_db)):
    return ChirpResponse.model_validate(db.get_chirp(chirp_id))


@router.delete("/{chirp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chirp(
    chirp_id: int,
    user_id: int = Depends(require_user),
    db: DocumentStore = Depends(get_db),
):
    """Delete a chirp. Only its author may do so."""
    chirp = db.get_chirp(chirp_id)
    if chirp.author_id != user_id:
        logger.warning(
            f"User {user_id} tried to delete chirp {chirp_id}",
            extra={"user_id": user_id, "chirp_id": chirp_id, "action": "delete_chirp"},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own chirps",
        )

    db.delete_chirp(chirp_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
