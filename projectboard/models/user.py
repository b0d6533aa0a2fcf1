"""User domain model: an account that can log in and join projects."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from projectboard.models.common import utc_now


@dataclass
class User:
    username: str
    password_hash: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    user_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Public representation; never includes the password hash."""
        return {
            "user_id": self.user_id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        return cls(
            user_id=row["user_id"],
            username=row["username"],
            password_hash=row["password_hash"],
            email=row.get("email"),
            full_name=row.get("full_name"),
            created_at=row.get("created_at", ""),
            updated_at=row.get("updated_at", ""),
        )
