"""Session lifecycle: login, single-use refresh, and explicit revocation"""
from chirpy.database import DocumentStore
from chirpy.exceptions import AuthenticationError, FormatError, NotFoundError, StoreIOError
from chirpy.models import User
from chirpy.utils.auth import extract_bearer_token
from chirpy.utils.jwt_utils import TokenPair, TokenService
from chirpy.utils.logger import logger


class SessionManager:
    """Composes the document store's revocation ledger with the token service"""

    def __init__(self, db: DocumentStore, tokens: TokenService) -> None:
        self.db = db
        self.tokens = tokens

    def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        """Check credentials and issue an access/refresh pair"""
        user = self.db.verify_password(email, password)
        pair = self.tokens.issue_token_pair(user.id)
        logger.info(f"User {user.id} logged in", extra={"user_id": user.id, "action": "login"})
        return user, pair

    def refresh(self, header: str) -> str:
        """
        Exchange a refresh token for a new access token

        The presented refresh token is consumed before the user lookup, so it
        cannot be replayed even if the exchange fails afterwards. Expired,
        forged, already-used and orphaned tokens all raise the same error.

        Raises:
            AuthenticationError: the token cannot be exchanged
        """
        user_id, token = self.tokens.validate_refresh_token(header)

        try:
            consumed = self.db.consume_token(token)
        except (StoreIOError, FormatError) as exc:
            logger.error(
                "Refresh token ledger unavailable, rejecting token",
                extra={"user_id": user_id, "action": "refresh_token", "error": str(exc)},
            )
            raise AuthenticationError("Invalid token") from exc

        if not consumed:
            logger.warning(
                "Rejected revoked refresh token",
                extra={"user_id": user_id, "action": "refresh_token"},
            )
            raise AuthenticationError("Invalid token")

        try:
            user = self.db.get_user(user_id)
        except NotFoundError as exc:
            raise AuthenticationError("Invalid token") from exc

        logger.info(f"Refreshed access token for user {user.id}", extra={"user_id": user.id, "action": "refresh_token"})
        return self.tokens.create_access_token(user.id)

    def revoke(self, header: str) -> None:
        """Add any bearer token to the ledger without validating it"""
        token = extract_bearer_token(header)
        self.db.revoke_token(token)
        logger.info("Revoked token", extra={"action": "revoke_token"})

    def authenticate(self, header: str) -> int:
        """Resolve an access token to a user id, honoring the ledger"""
        user_id = self.tokens.validate_access_token(header)
        if self.db.is_token_revoked(extract_bearer_token(header)):
            raise AuthenticationError("Token has been revoked")
        return user_id
