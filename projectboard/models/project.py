"""Project domain model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from projectboard.models.common import utc_now


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    ARCHIVED = "archived"


@dataclass
class Project:
    name: str
    owner: str
    project_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "owner": self.owner,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Project":
        return cls(
            project_id=row["project_id"],
            name=row["name"],
            owner=row["owner"],
            description=row.get("description") or "",
            status=ProjectStatus(row.get("status", "active")),
            start_date=row.get("start_date"),
            end_date=row.get("end_date"),
            created_at=row.get("created_at", ""),
            updated_at=row.get("updated_at", ""),
        )
