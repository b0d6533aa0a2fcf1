"""Repository for the ``users`` table."""

from __future__ import annotations

from typing import Optional

from projectboard.db.database import Database
from projectboard.models.user import User


class UserRepository:
    def __init__(self, db: Database):
        self._db = db

    def create(self, user: User) -> User:
        """Insert a new user. Raises ``ConflictError`` on duplicate username/email."""
        with self._db.transaction() as conn:
            conn.execute(
                """INSERT INTO users
                   (user_id, username, email, full_name, password_hash, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    user.user_id, user.username, user.email, user.full_name,
                    user.password_hash, user.created_at, user.updated_at,
                ),
            )
        return user

    def get_by_username(self, username: str) -> Optional[User]:
        row = self._db.fetchone("SELECT * FROM users WHERE username = ?", (username,))
        return User.from_row(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = self._db.fetchone("SELECT * FROM users WHERE email = ?", (email,))
        return User.from_row(row) if row else None

    def list_all(self) -> list[User]:
        rows = self._db.fetchall("SELECT * FROM users ORDER BY username")
        return [User.from_row(r) for r in rows]
