"""Project service: CRUD and per-project statistics."""

from __future__ import annotations

import logging
from typing import Any, Optional

from projectboard.db.activity_repo import ActivityRepository
from projectboard.db.database import Database
from projectboard.db.member_repo import MemberRepository
from projectboard.db.project_repo import ProjectRepository
from projectboard.db.task_repo import TaskRepository
from projectboard.models.common import utc_today
from projectboard.models.member import Permission
from projectboard.models.project import Project, ProjectStatus
from projectboard.models.task import Task, TaskStatus
from projectboard.services.access import ProjectAccess
from projectboard.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)


def _parse_project_status(raw: str) -> ProjectStatus:
    try:
        return ProjectStatus(raw.strip().lower())
    except ValueError:
        raise BadRequestError(
            f"Invalid project status: {raw!r}. Expected one of: "
            + ", ".join(s.value for s in ProjectStatus)
        ) from None


def completion_rate(done: int, total: int) -> float:
    return round(done * 100.0 / total, 1) if total else 0.0


def task_stats(tasks: list[Task], today: Optional[str] = None) -> dict[str, Any]:
    """Status breakdown, completion rate and overdue count for a list of tasks."""
    today = today or utc_today()
    by_status = {s.value: 0 for s in TaskStatus}
    for t in tasks:
        by_status[t.status.value] += 1
    total = len(tasks)
    return {
        "total_tasks": total,
        "by_status": by_status,
        "completed_tasks": by_status[TaskStatus.DONE.value],
        "completion_rate": completion_rate(by_status[TaskStatus.DONE.value], total),
        "overdue_tasks": sum(1 for t in tasks if t.is_overdue(today)),
    }


class ProjectService:
    def __init__(self, db: Database):
        self._projects = ProjectRepository(db)
        self._members = MemberRepository(db)
        self._tasks = TaskRepository(db)
        self._activity = ActivityRepository(db)
        self._access = ProjectAccess(db)

    # -- Read ------------------------------------------------------------------

    def list_projects(self, username: str) -> list[dict[str, Any]]:
        return [
            {**project.to_dict(), "role": role}
            for project, role in self._projects.list_for_user(username)
        ]

    def get_project(self, project_id: str, username: str) -> dict[str, Any]:
        project, membership = self._access.require(project_id, username, Permission.VIEW_PROJECT)
        return {
            **project.to_dict(),
            "role": membership.role.value,
            "member_count": self._members.count(project_id),
        }

    def get_stats(self, project_id: str, username: str) -> dict[str, Any]:
        project, _ = self._access.require(project_id, username, Permission.VIEW_PROJECT)
        stats = task_stats(self._tasks.list_for_project(project_id))
        stats["project_id"] = project.project_id
        stats["name"] = project.name
        stats["member_count"] = self._members.count(project_id)
        return stats

    # -- Create ----------------------------------------------------------------

    def create_project(
        self,
        username: str,
        name: str,
        description: str = "",
        status: str = ProjectStatus.ACTIVE.value,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict[str, Any]:
        name = name.strip()
        if not name:
            raise BadRequestError("Project name must not be empty")
        project = Project(
            name=name,
            owner=username,
            description=description or "",
            status=_parse_project_status(status),
            start_date=start_date,
            end_date=end_date,
        )
        self._projects.create(project)
        self._activity.log(
            username, "created", "project",
            project_id=project.project_id, subject_id=project.project_id,
            message=f"Created project {project.name}",
        )
        logger.info(f"Project {project.project_id} created by {username}: {project.name}")
        return {**project.to_dict(), "role": "owner", "member_count": 1}

    # -- Update ----------------------------------------------------------------

    def update_project(self, project_id: str, username: str, fields: dict[str, Any]) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.EDIT_PROJECT)
        updates = dict(fields)
        if "name" in updates:
            if not updates["name"] or not updates["name"].strip():
                raise BadRequestError("Project name must not be empty")
            updates["name"] = updates["name"].strip()
        if "status" in updates and updates["status"] is not None:
            updates["status"] = _parse_project_status(updates["status"]).value
        elif "status" in updates:
            del updates["status"]
        if "description" in updates and updates["description"] is None:
            updates["description"] = ""

        project = self._projects.update(project_id, **updates)
        if project is None:
            raise NotFoundError("Project not found")
        self._activity.log(
            username, "updated", "project",
            project_id=project_id, subject_id=project_id,
            message=f"Updated project fields: {', '.join(sorted(updates)) or 'none'}",
        )
        return self.get_project(project_id, username)

    # -- Delete ----------------------------------------------------------------

    def delete_project(self, project_id: str, username: str) -> dict[str, Any]:
        project, _ = self._access.require(project_id, username, Permission.DELETE_PROJECT)
        self._projects.delete(project_id)
        logger.info(f"Project {project_id} deleted by {username}")
        return {"message": f"Project '{project.name}' deleted successfully", "project_id": project_id}
