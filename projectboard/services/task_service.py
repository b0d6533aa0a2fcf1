"""Task service: project-scoped task CRUD and status transitions."""

from __future__ import annotations

import logging
from typing import Any, Optional

from projectboard.db.activity_repo import ActivityRepository
from projectboard.db.database import Database
from projectboard.db.member_repo import MemberRepository
from projectboard.db.task_repo import TaskRepository
from projectboard.models.common import utc_now
from projectboard.models.member import Permission
from projectboard.models.task import Task, TaskStatus
from projectboard.services.access import ProjectAccess
from projectboard.errors import BadRequestError, NotFoundError
from projectboard.services.status import normalise_status, parse_priority

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, db: Database):
        self._tasks = TaskRepository(db)
        self._members = MemberRepository(db)
        self._activity = ActivityRepository(db)
        self._access = ProjectAccess(db)

    def _require_task(self, project_id: str, task_id: str) -> Task:
        task = self._tasks.get(project_id, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def _check_assignee(self, project_id: str, assignee: Optional[str]) -> None:
        if assignee and self._members.get(project_id, assignee) is None:
            raise BadRequestError(f"Assignee {assignee!r} is not a member of this project")

    # -- Read ------------------------------------------------------------------

    def list_tasks(
        self,
        project_id: str,
        username: str,
        status: Optional[str] = None,
        assignee: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        self._access.require(project_id, username, Permission.VIEW_PROJECT)
        tasks = self._tasks.list_for_project(
            project_id,
            status=normalise_status(status) if status else None,
            assignee=assignee,
            priority=parse_priority(priority) if priority else None,
        )
        return [t.to_dict() for t in tasks]

    def get_task(self, project_id: str, task_id: str, username: str) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.VIEW_PROJECT)
        return self._require_task(project_id, task_id).to_dict()

    # -- Create ----------------------------------------------------------------

    def create_task(
        self,
        project_id: str,
        username: str,
        title: str,
        description: str = "",
        status: str = TaskStatus.TODO.value,
        priority: str = "medium",
        assignee: Optional[str] = None,
        due_date: Optional[str] = None,
        labels: Optional[list[str]] = None,
    ) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.CREATE_TASKS)
        title = title.strip()
        if not title:
            raise BadRequestError("Task title must not be empty")
        self._check_assignee(project_id, assignee)

        task = Task(
            project_id=project_id,
            title=title,
            description=description or "",
            status=normalise_status(status),
            priority=parse_priority(priority),
            assignee=assignee or None,
            due_date=due_date,
            labels=list(labels or []),
            created_by=username,
        )
        if task.status == TaskStatus.DONE:
            task.completed_at = task.created_at
        self._tasks.create(task)
        self._activity.log(
            username, "created", "task",
            project_id=project_id, subject_id=task.task_id,
            message=f"Created task {task.title}",
        )
        logger.info(f"Created task {task.task_id} in project {project_id}: {task.title}")
        return task.to_dict()

    # -- Update ----------------------------------------------------------------

    def update_task(
        self, project_id: str, task_id: str, username: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.EDIT_TASKS)
        current = self._require_task(project_id, task_id)

        updates = dict(fields)
        if "title" in updates:
            if not updates["title"] or not updates["title"].strip():
                raise BadRequestError("Task title must not be empty")
            updates["title"] = updates["title"].strip()
        if "description" in updates and updates["description"] is None:
            updates["description"] = ""
        if "priority" in updates:
            if updates["priority"] is None:
                del updates["priority"]
            else:
                updates["priority"] = parse_priority(updates["priority"]).value
        if "assignee" in updates:
            updates["assignee"] = updates["assignee"] or None
            self._check_assignee(project_id, updates["assignee"])
        if "labels" in updates and updates["labels"] is None:
            updates["labels"] = []
        if "status" in updates:
            if updates["status"] is None:
                del updates["status"]
            else:
                new_status = normalise_status(updates["status"])
                updates.update(self._status_fields(current, new_status))

        task = self._tasks.update(project_id, task_id, **updates)
        self._activity.log(
            username, "updated", "task",
            project_id=project_id, subject_id=task_id,
            message=f"Updated task {task.title}",
        )
        return task.to_dict()

    def update_status(
        self, project_id: str, task_id: str, username: str, status: str
    ) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.UPDATE_TASK_STATUS)
        current = self._require_task(project_id, task_id)
        new_status = normalise_status(status)

        task = self._tasks.update(project_id, task_id, **self._status_fields(current, new_status))
        self._activity.log(
            username, "status_changed", "task",
            project_id=project_id, subject_id=task_id,
            message=f"Moved task {task.title} from {current.status.value} to {new_status.value}",
        )
        logger.info(f"Task {task_id} status {current.status.value} -> {new_status.value}")
        return task.to_dict()

    @staticmethod
    def _status_fields(current: Task, new_status: TaskStatus) -> dict[str, Any]:
        """Status plus the matching ``completed_at`` (set entering done, cleared leaving it)."""
        fields: dict[str, Any] = {"status": new_status.value}
        if new_status == TaskStatus.DONE and current.status != TaskStatus.DONE:
            fields["completed_at"] = utc_now()
        elif new_status != TaskStatus.DONE:
            fields["completed_at"] = None
        return fields

    # -- Delete ----------------------------------------------------------------

    def delete_task(self, project_id: str, task_id: str, username: str) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.DELETE_TASKS)
        task = self._require_task(project_id, task_id)
        self._tasks.delete(project_id, task_id)
        self._activity.log(
            username, "deleted", "task",
            project_id=project_id, subject_id=task_id,
            message=f"Deleted task {task.title}",
        )
        return {"message": "Task deleted successfully", "task_id": task_id}
