"""Activity entry: one audit-trail row per mutation."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from projectboard.models.common import utc_now


@dataclass
class Activity:
    username: str
    action: str
    subject: str
    project_id: Optional[str] = None
    subject_id: Optional[str] = None
    message: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "username": self.username,
            "action": self.action,
            "subject": self.subject,
            "subject_id": self.subject_id,
            "message": self.message,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Activity":
        return cls(
            id=row["id"],
            project_id=row.get("project_id"),
            username=row["username"],
            action=row["action"],
            subject=row["subject"],
            subject_id=row.get("subject_id"),
            message=row.get("message"),
            created_at=row.get("created_at", ""),
        )
