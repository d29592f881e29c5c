"""Chirp body cleaning"""
from typing import FrozenSet

BANNED_WORDS: FrozenSet[str] = frozenset({"kerfuffle", "sharbert", "fornax"})
REPLACEMENT = "****"


def clean_chirp_body(body: str, banned: FrozenSet[str] = BANNED_WORDS) -> str:
    """
    Mask banned words in a chirp

    Words are split on single spaces and compared case-insensitively. Words
    with attached punctuation ("Sharbert!") are left alone.
    """
    return " ".join(REPLACEMENT if word.lower() in banned else word for word in body.split(" "))
