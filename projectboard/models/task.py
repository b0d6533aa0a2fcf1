"""Task domain model: a work item inside a project."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from projectboard.models.common import utc_now


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"


class TaskPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class Task:
    """A unit of work belonging to exactly one project."""

    project_id: str
    title: str
    task_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: Optional[str] = None
    due_date: Optional[str] = None
    labels: list[str] = field(default_factory=list)
    created_by: Optional[str] = None
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)
    completed_at: Optional[str] = None

    def labels_json(self) -> str:
        return json.dumps(self.labels)

    @staticmethod
    def parse_labels(raw: Optional[str]) -> list[str]:
        if not raw:
            return []
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return []

    def is_overdue(self, today: str) -> bool:
        """True when the due date (YYYY-MM-DD prefix) is before ``today`` and the task is open."""
        if not self.due_date or self.status == TaskStatus.DONE:
            return False
        return self.due_date[:10] < today

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "project_id": self.project_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "assignee": self.assignee,
            "due_date": self.due_date,
            "labels": list(self.labels),
            "created_by": self.created_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Task":
        return cls(
            task_id=row["task_id"],
            project_id=row["project_id"],
            title=row["title"],
            description=row.get("description") or "",
            status=TaskStatus(row.get("status", "todo")),
            priority=TaskPriority(row.get("priority", "medium")),
            assignee=row.get("assignee"),
            due_date=row.get("due_date"),
            labels=cls.parse_labels(row.get("labels")),
            created_by=row.get("created_by"),
            created_at=row.get("created_at", ""),
            updated_at=row.get("updated_at", ""),
            completed_at=row.get("completed_at"),
        )
