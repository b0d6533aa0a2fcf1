"""Client-side session: the bearer token and the cached user profile."""

from __future__ import annotations

import threading
from typing import Any, Optional

from projectboard.utils.redact import redact


class AuthSession:
    """
    Holds the token/user pair for one client.

    ``set_token`` and ``clear_token`` are the only ways to change it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._user: Optional[dict[str, Any]] = None

    def get_token(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set_token(self, token: str, user: Optional[dict[str, Any]] = None) -> None:
        with self._lock:
            self._token = token
            self._user = dict(user) if user else None

    def clear_token(self) -> None:
        with self._lock:
            self._token = None
            self._user = None

    @property
    def user(self) -> Optional[dict[str, Any]]:
        with self._lock:
            return dict(self._user) if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self.get_token() is not None

    def __repr__(self) -> str:
        token = self.get_token()
        shown = redact(f"Bearer {token}") if token else "anonymous"
        return f"AuthSession({shown})"
