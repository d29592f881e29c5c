"""User record"""
from pydantic import BaseModel


class User(BaseModel):
    """A registered account.

    ``password`` holds the argon2 hash, never the raw password, and is
    excluded from every outward-facing schema.
    """

    id: int
    email: str
    password: str
    is_chirpy_red: bool = False
