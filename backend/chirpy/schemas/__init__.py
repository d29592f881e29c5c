"""Pydantic schemas for request/response validation"""
from chirpy.schemas.chirp import ChirpCreate, ChirpResponse
from chirpy.schemas.token import RefreshResponse
from chirpy.schemas.user import LoginResponse, UserCreate, UserLogin, UserResponse, UserUpdate
from chirpy.schemas.webhook import PolkaEvent, PolkaEventData

__all__ = [
    "ChirpCreate",
    "ChirpResponse",
    "RefreshResponse",
    "LoginResponse",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserUpdate",
    "PolkaEvent",
    "PolkaEventData",
]
