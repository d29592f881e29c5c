"""User schemas"""
from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a user"""

    email: str = Field(..., min_length=1, description="Login email, unique across users")
    password: str = Field(..., min_length=1, description="Raw password; only its hash is stored")


class UserUpdate(BaseModel):
    """Schema for updating the authenticated user. Empty fields are left unchanged."""

    email: str = ""
    password: str = ""


class UserLogin(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """Schema for user response (never includes the password hash)"""

    id: int
    email: str
    is_chirpy_red: bool

    class Config:
        from_attributes = True


class LoginResponse(UserResponse):
    """Returned by /api/login with the freshly issued tokens"""

    token: str
    refresh_token: Optional[str] = None
