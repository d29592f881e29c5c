"""Chirp schemas"""
from pydantic import BaseModel, Field


class ChirpCreate(BaseModel):
    """Schema for posting a chirp; length is checked against CHIRP_MAX_LENGTH by the route"""

    body: str = Field(..., description="Chirp text")


class ChirpResponse(BaseModel):
    id: int
    body: str
    author_id: int

    class Config:
        from_attributes = True
