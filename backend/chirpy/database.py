"""Single-file JSON document store.

Every public operation takes the store lock, loads the whole document,
mutates it and writes it back. There is no cache: the file is the only copy
of the state, and each write replaces it atomically via a temp file and
``os.replace``.
"""
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Literal, Optional

from pydantic import ValidationError as PydanticValidationError

from chirpy.config import settings
from chirpy.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    FormatError,
    NotFoundError,
    StoreIOError,
    ValidationError,
)
from chirpy.models import Chirp, Document, RevokedToken, User
from chirpy.utils.auth import hash_password, verify_password_hash
from chirpy.utils.logger import logger

DB_FILE_MODE = 0o644

SortDirection = Literal["asc", "desc"]


class DocumentStore:
    """Lock-guarded CRUD over users, chirps and the revoked-token ledger"""

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()
        with self._lock:
            self._ensure_file()

    # ------------------------------------------------------------------
    # File I/O (callers must hold the lock)
    # ------------------------------------------------------------------

    def _ensure_file(self) -> None:
        if os.path.exists(self.path):
            return
        logger.info(f"Creating database file {self.path}", extra={"action": "create_database"})
        self._write(Document())

    def _read(self) -> Document:
        self._ensure_file()
        try:
            with open(self.path, "rb") as fh:
                raw = fh.read()
        except OSError as exc:
            raise StoreIOError(f"Cannot read {self.path}: {exc}") from exc

        try:
            return Document.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise FormatError(f"Corrupt database file {self.path}: {exc}") from exc

    def _write(self, doc: Document) -> None:
        data = doc.model_dump_json().encode()
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".chirpy-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, DB_FILE_MODE)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise StoreIOError(f"Cannot write {self.path}: {exc}") from exc
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    @contextmanager
    def _transaction(self, write: bool = True) -> Iterator[Document]:
        """Hold the lock across load → mutate → persist.

        Reads take the same lock as writes. The document is only written back
        when the body completes without raising.
        """
        with self._lock:
            doc = self._read()
            yield doc
            if write:
                self._write(doc)

    # ------------------------------------------------------------------
    # Whole-document access
    # ------------------------------------------------------------------

    def load(self) -> Document:
        """Return a copy of the full document, creating the file if absent"""
        with self._lock:
            return self._read()

    def persist(self, doc: Document) -> None:
        """Overwrite the file with ``doc``"""
        with self._lock:
            self._write(doc)

    def reset(self) -> None:
        """Replace the stored state with an empty document"""
        with self._lock:
            self._write(Document())
        logger.warning("Database reset", extra={"action": "reset_database"})

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, email: str, password: str) -> User:
        """
        Register a user

        Raises:
            DuplicateEmailError: another user already has ``email``
        """
        hashed = hash_password(password)
        with self._transaction() as doc:
            if _find_user_by_email(doc, email) is not None:
                raise DuplicateEmailError(email)

            user = User(id=doc.next_user_id(), email=email, password=hashed)
            doc.users[user.id] = user

        logger.info(f"Created user {user.id}", extra={"user_id": user.id, "action": "create_user"})
        return user

    def get_user(self, user_id: int) -> User:
        with self._transaction(write=False) as doc:
            user = doc.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def update_user(self, user_id: int, email: str = "", password: str = "") -> User:
        """
        Replace a user's email and/or password

        Empty values leave the field unchanged. The new email is not checked
        against other users.
        """
        hashed = hash_password(password) if password else ""
        with self._transaction() as doc:
            user = doc.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if email:
                user.email = email
            if hashed:
                user.password = hashed

        logger.info(f"Updated user {user_id}", extra={"user_id": user_id, "action": "update_user"})
        return user

    def upgrade_user(self, user_id: int) -> User:
        """Mark a user as a Chirpy Red subscriber"""
        with self._transaction() as doc:
            user = doc.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            user.is_chirpy_red = True

        logger.info(f"Upgraded user {user_id}", extra={"user_id": user_id, "action": "upgrade_user"})
        return user

    def verify_password(self, email: str, password: str) -> User:
        """
        Look a user up by email and check the password

        Raises:
            AuthenticationError: unknown email or wrong password
        """
        with self._transaction(write=False) as doc:
            user = _find_user_by_email(doc, email)

        if user is None or not verify_password_hash(user.password, password):
            raise AuthenticationError("Invalid credentials")
        return user

    # ------------------------------------------------------------------
    # Chirps
    # ------------------------------------------------------------------

    def create_chirp(self, body: str, author_id: int) -> Chirp:
        """Store a chirp verbatim; length and content checks belong to the caller"""
        with self._transaction() as doc:
            chirp = Chirp(id=doc.next_chirp_id(), body=body, author_id=author_id)
            doc.chirps[chirp.id] = chirp

        logger.info(
            f"Created chirp {chirp.id}",
            extra={"chirp_id": chirp.id, "user_id": author_id, "action": "create_chirp"},
        )
        return chirp

    def get_chirps(self, author_id: Optional[int] = 0, sort: SortDirection = "asc") -> List[Chirp]:
        """
        List chirps ordered by id

        Args:
            author_id: Only return this author's chirps; 0 or None means everyone
            sort: "asc" or "desc"

        Returns:
            Possibly empty list of chirps
        """
        if sort not in ("asc", "desc"):
            raise ValidationError(f"Invalid sort direction: {sort}")

        with self._transaction(write=False) as doc:
            chirps = list(doc.chirps.values())

        if author_id:
            chirps = [c for c in chirps if c.author_id == author_id]
        chirps.sort(key=lambda c: c.id, reverse=(sort == "desc"))
        return chirps

    def get_chirp(self, chirp_id: int) -> Chirp:
        with self._transaction(write=False) as doc:
            chirp = doc.chirps.get(chirp_id)
        if chirp is None:
            raise NotFoundError("Chirp", chirp_id)
        return chirp

    def delete_chirp(self, chirp_id: int) -> None:
        """Remove a chirp. Authorship is checked by the caller."""
        with self._transaction() as doc:
            if chirp_id not in doc.chirps:
                raise NotFoundError("Chirp", chirp_id)
            del doc.chirps[chirp_id]

        logger.info(f"Deleted chirp {chirp_id}", extra={"chirp_id": chirp_id, "action": "delete_chirp"})

    # ------------------------------------------------------------------
    # Revoked tokens
    # ------------------------------------------------------------------

    def revoke_token(self, token: str) -> None:
        """Add ``token`` to the ledger. Revoking twice overwrites the timestamp."""
        with self._transaction() as doc:
            doc.revoked_tokens[token] = RevokedToken(revoked_at=datetime.now(timezone.utc))

    def consume_token(self, token: str) -> bool:
        """
        Revoke ``token`` unless it is already in the ledger

        The check and the insert share one transaction, so at most one caller
        ever gets True for a given token.

        Returns:
            False if the token was already revoked
        """
        with self._lock:
            doc = self._read()
            if token in doc.revoked_tokens:
                return False
            doc.revoked_tokens[token] = RevokedToken(revoked_at=datetime.now(timezone.utc))
            self._write(doc)
        return True

    def is_token_revoked(self, token: str) -> bool:
        """
        Check the ledger for ``token``

        Fails closed: if the document cannot be loaded the token is reported
        as revoked.
        """
        try:
            with self._transaction(write=False) as doc:
                return token in doc.revoked_tokens
        except (StoreIOError, FormatError) as exc:
            logger.error(
                "Revocation check failed, treating token as revoked",
                extra={"action": "is_token_revoked", "error": str(exc)},
            )
            return True


def _find_user_by_email(doc: Document, email: str) -> Optional[User]:
    for user in doc.users.values():
        if user.email == email:
            return user
    return None


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

_store: Optional[DocumentStore] = None


def get_db() -> DocumentStore:
    """Return the process-wide store, opening it on first use"""
    global _store
    if _store is None:
        _store = DocumentStore(settings.DATABASE_PATH)
    return _store
