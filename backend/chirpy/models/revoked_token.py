"""RevokedToken record — raw-token blocklist entry"""
from datetime import datetime

from pydantic import BaseModel


class RevokedToken(BaseModel):
    """Ledger entry for a token string that is no longer honored.

    The entry is keyed by the raw token in ``Document.revoked_tokens``; only
    the revocation instant is stored. Entries are never pruned.
    """

    revoked_at: datetime
