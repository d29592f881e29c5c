"""Persisted document models"""
from chirpy.models.chirp import Chirp
from chirpy.models.document import Document, Sequences
from chirpy.models.revoked_token import RevokedToken
from chirpy.models.user import User

__all__ = ["Chirp", "Document", "RevokedToken", "Sequences", "User"]
