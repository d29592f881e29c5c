"""Document model — the whole persisted state in one aggregate"""
from typing import Dict

from pydantic import BaseModel, Field, model_validator

from chirpy.models.chirp import Chirp
from chirpy.models.revoked_token import RevokedToken
from chirpy.models.user import User


class Sequences(BaseModel):
    """Last id handed out per record type. Only ever increases."""

    users: int = 0
    chirps: int = 0


class Document(BaseModel):
    """Users, chirps and revoked tokens as stored on disk.

    Mapping keys are serialized as strings by JSON; pydantic coerces them
    back to ``int`` on load.
    """

    users: Dict[int, User] = Field(default_factory=dict)
    chirps: Dict[int, Chirp] = Field(default_factory=dict)
    revoked_tokens: Dict[str, RevokedToken] = Field(default_factory=dict)
    sequences: Sequences = Field(default_factory=Sequences)

    @model_validator(mode="after")
    def _seed_sequences(self) -> "Document":
        # Files written before sequences existed only carry the maps
        self.sequences.users = max([self.sequences.users, *self.users])
        self.sequences.chirps = max([self.sequences.chirps, *self.chirps])
        return self

    def next_user_id(self) -> int:
        self.sequences.users += 1
        return self.sequences.users

    def next_chirp_id(self) -> int:
        self.sequences.chirps += 1
        return self.sequences.chirps
