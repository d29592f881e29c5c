"""User registration, login and profile endpoints"""
from fastapi import APIRouter, Depends, Request, status

from chirpy.api.deps import get_session_manager, require_user
from chirpy.config import settings
from chirpy.database import DocumentStore, get_db
from chirpy.middleware.rate_limit import limiter
from chirpy.schemas.user import LoginResponse, UserCreate, UserLogin, UserResponse, UserUpdate
from chirpy.utils.sessions import SessionManager

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, db: DocumentStore = Depends(get_db)):
    """
    Register a user

    Returns 409 if the email is already registered.
    """
    user = db.create_user(data.email, data.password)
    return UserResponse.model_validate(user)


@router.put("/users", response_model=UserResponse)
def update_user(
    data: UserUpdate,
    user_id: int = Depends(require_user),
    db: DocumentStore = Depends(get_db),
):
    """Update the authenticated user's email and/or password"""
    user = db.update_user(user_id, data.email, data.password)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
def login(
    request: Request,
    data: UserLogin,
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    Exchange email and password for an access token (1 hour) and a
    refresh token (60 days)
    """
    user, pair = sessions.login(data.email, data.password)
    return LoginResponse(
        id=user.id,
        email=user.email,
        is_chirpy_red=user.is_chirpy_red,
        token=pair.access_token,
        refresh_token=pair.refresh_token,
    )
