"""JWT utilities — access/refresh token signing and verification"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from jose import JWTError, jwt

from chirpy.config import settings
from chirpy.exceptions import AuthenticationError
from chirpy.utils.auth import extract_bearer_token
from chirpy.utils.logger import logger

ACCESS_ISSUER = "chirpy-access"
REFRESH_ISSUER = "chirpy-refresh"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


class TokenService:
    """Issues and validates access and refresh JWTs.

    Both kinds are signed with the same secret; the ``iss`` claim tells them
    apart, so a refresh token is never accepted where an access token is
    expected and vice versa. Stateless apart from its configuration.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=60),
        clock: Clock = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock

    # ------------------------------------------------------------------
    # Token creation
    # ------------------------------------------------------------------

    def _sign(self, user_id: int, issuer: str, ttl: timedelta) -> str:
        now = int(self._clock().timestamp())
        payload: Dict[str, Any] = {
            "iss": issuer,
            "sub": str(user_id),
            "iat": now,
            "exp": now + int(ttl.total_seconds()),
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def create_access_token(self, user_id: int) -> str:
        """Sign a short-lived access token for ``user_id``"""
        return self._sign(user_id, ACCESS_ISSUER, self.access_ttl)

    def create_refresh_token(self, user_id: int) -> str:
        """Sign a long-lived, single-use refresh token for ``user_id``"""
        return self._sign(user_id, REFRESH_ISSUER, self.refresh_ttl)

    def issue_token_pair(self, user_id: int) -> TokenPair:
        return TokenPair(
            access_token=self.create_access_token(user_id),
            refresh_token=self.create_refresh_token(user_id),
        )

    # ------------------------------------------------------------------
    # Token verification
    # ------------------------------------------------------------------

    def _decode(self, header: str, issuer: str) -> Tuple[int, str]:
        """Verify signature, expiry and issuer; return (user_id, raw token).

        Raises:
            AuthenticationError: on any verification failure
        """
        token = extract_bearer_token(header)
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                issuer=issuer,
            )
        except JWTError as exc:
            logger.debug(f"JWT decode failed: {exc}")
            raise AuthenticationError("Invalid token") from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not (subject.isascii() and subject.isdigit()):
            raise AuthenticationError("Invalid token subject")
        return int(subject), token

    def validate_access_token(self, header: str) -> int:
        """Return the user id carried by a ``Bearer`` access token"""
        user_id, _ = self._decode(header, ACCESS_ISSUER)
        return user_id

    def validate_refresh_token(self, header: str) -> Tuple[int, str]:
        """Return ``(user_id, raw_token)`` for a ``Bearer`` refresh token"""
        return self._decode(header, REFRESH_ISSUER)


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Return the process-wide token service built from settings"""
    global _token_service
    if _token_service is None:
        _token_service = TokenService(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            access_ttl=timedelta(seconds=settings.JWT_ACCESS_EXPIRE_SECONDS),
            refresh_ttl=timedelta(seconds=settings.JWT_REFRESH_EXPIRE_SECONDS),
        )
    return _token_service
