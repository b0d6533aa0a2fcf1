"""Authentication service: accounts, password hashing and bearer sessions."""

from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt

from projectboard.db.database import Database
from projectboard.db.session_repo import SessionRepository
from projectboard.db.user_repo import UserRepository
from projectboard.models.common import TIMESTAMP_FORMAT, utc_now
from projectboard.models.user import User
from projectboard.errors import AuthenticationError, BadRequestError, ConflictError
from projectboard.utils.redact import redact

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt; the result embeds its own salt and cost."""
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise BadRequestError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or an over-long password that was never accepted.
        return False


def generate_token() -> str:
    """Generate a secure random bearer token."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class AuthService:
    """
    Account and session management.

    Tokens are opaque; only their SHA-256 digest is persisted, so a leaked
    database cannot be replayed as bearer credentials.
    """

    def __init__(
        self,
        db: Database,
        token_ttl_hours: int = 24,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        self._users = UserRepository(db)
        self._sessions = SessionRepository(db)
        self._ttl = timedelta(hours=token_ttl_hours)
        self._rounds = bcrypt_rounds

    def signup(
        self,
        username: str,
        password: str,
        email: Optional[str] = None,
        full_name: Optional[str] = None,
    ) -> User:
        username = username.strip()
        email = email.strip() if email else None
        if self._users.get_by_username(username):
            raise ConflictError("Username already exists")
        if email and self._users.get_by_email(email):
            raise ConflictError("Email already registered")

        user = User(
            username=username,
            password_hash=hash_password(password, self._rounds),
            email=email,
            full_name=full_name,
        )
        # A concurrent signup can still win the race; the DB layer turns that into a 409.
        self._users.create(user)
        logger.info(f"Registered user {username}")
        return user

    def login(self, username: str, password: str) -> tuple[str, str, User]:
        """Return ``(token, expires_at, user)`` for valid credentials."""
        user = self._users.get_by_username(username.strip())
        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {username!r}")
            raise AuthenticationError("Invalid username or password")

        token = generate_token()
        expires_at = (datetime.now(timezone.utc) + self._ttl).strftime(TIMESTAMP_FORMAT)
        self._sessions.create(hash_token(token), user.username, expires_at)
        logger.info(f"User {user.username} logged in, session expires {expires_at}")
        return token, expires_at, user

    def logout(self, token: str) -> bool:
        removed = self._sessions.delete(hash_token(token))
        logger.info(f"Logout {redact('Bearer ' + token)}: {'removed' if removed else 'unknown session'}")
        return removed

    def authenticate(self, token: Optional[str]) -> User:
        """Resolve a bearer token to its user, or raise a 401."""
        if not token:
            raise AuthenticationError("Not authenticated")

        token_hash = hash_token(token)
        session = self._sessions.get(token_hash)
        if session is None:
            logger.debug(f"Rejected unknown token {redact('Bearer ' + token)}")
            raise AuthenticationError("Invalid or expired token")
        if session["expires_at"] <= utc_now():
            self._sessions.delete(token_hash)
            logger.info(f"Session for {session['username']} expired")
            raise AuthenticationError("Invalid or expired token")

        user = self._users.get_by_username(session["username"])
        if user is None:
            self._sessions.delete(token_hash)
            raise AuthenticationError("Invalid or expired token")
        return user

    def purge_expired(self) -> int:
        return self._sessions.delete_expired(utc_now())
