"""Repository for the ``sessions`` table: issued bearer tokens."""

from __future__ import annotations

from typing import Any, Optional

from projectboard.db.database import Database


class SessionRepository:
    """Tokens are stored only as digests; callers hash before every lookup."""

    def __init__(self, db: Database):
        self._db = db

    def create(self, token_hash: str, username: str, expires_at: str) -> None:
        with self._db.transaction() as conn:
            conn.execute(
                "INSERT INTO sessions (token_hash, username, expires_at) VALUES (?, ?, ?)",
                (token_hash, username, expires_at),
            )

    def get(self, token_hash: str) -> Optional[dict[str, Any]]:
        return self._db.fetchone("SELECT * FROM sessions WHERE token_hash = ?", (token_hash,))

    def delete(self, token_hash: str) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM sessions WHERE token_hash = ?", (token_hash,))
        return cursor.rowcount > 0

    def delete_for_user(self, username: str) -> int:
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM sessions WHERE username = ?", (username,))
        return cursor.rowcount

    def delete_expired(self, now: str) -> int:
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM sessions WHERE expires_at <= ?", (now,))
        return cursor.rowcount
