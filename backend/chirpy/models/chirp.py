"""Chirp record"""
from pydantic import BaseModel


class Chirp(BaseModel):
    """A short text post.

    ``author_id`` is not checked against the users mapping when written.
    """

    id: int
    body: str
    author_id: int
