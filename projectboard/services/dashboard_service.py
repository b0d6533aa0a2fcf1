"""Dashboard service: the caller's cross-project overview."""

from __future__ import annotations

from typing import Any

from projectboard.db.activity_repo import ActivityRepository
from projectboard.db.database import Database
from projectboard.db.project_repo import ProjectRepository
from projectboard.db.task_repo import TaskRepository
from projectboard.models.common import utc_today
from projectboard.models.task import TaskStatus
from projectboard.models.user import User
from projectboard.errors import BadRequestError
from projectboard.services.project_service import task_stats

MAX_ACTIVITY_LIMIT = 100


class DashboardService:
    def __init__(self, db: Database):
        self._projects = ProjectRepository(db)
        self._tasks = TaskRepository(db)
        self._activity = ActivityRepository(db)

    def summary(self, user: User) -> dict[str, Any]:
        today = utc_today()
        all_tasks = self._tasks.list_for_user_projects(user.username)

        projects = []
        for project, role in self._projects.list_for_user(user.username):
            stats = task_stats([t for t in all_tasks if t.project_id == project.project_id], today)
            projects.append({**project.to_dict(), "role": role, "stats": stats})

        my_open = self._tasks.get_by_assignee(user.username, open_only=True)
        return {
            "user": user.to_dict(),
            "projects": projects,
            "my_tasks": [t.to_dict() for t in my_open],
            "overdue_tasks": [t.to_dict() for t in all_tasks if t.is_overdue(today)],
            "totals": self._totals(user.username, len(projects), all_tasks, len(my_open), today),
            "recent_activity": [a.to_dict() for a in self._activity.recent_for_user(user.username, 10)],
        }

    def quick_summary(self, user: User) -> dict[str, Any]:
        today = utc_today()
        all_tasks = self._tasks.list_for_user_projects(user.username)
        my_open = len(self._tasks.get_by_assignee(user.username, open_only=True))
        project_count = len(self._projects.list_for_user(user.username))
        return self._totals(user.username, project_count, all_tasks, my_open, today)

    def recent_activity(self, user: User, limit: int = 10) -> dict[str, Any]:
        if limit < 1 or limit > MAX_ACTIVITY_LIMIT:
            raise BadRequestError(f"limit must be between 1 and {MAX_ACTIVITY_LIMIT}")
        activities = self._activity.recent_for_user(user.username, limit)
        return {"count": len(activities), "activities": [a.to_dict() for a in activities]}

    @staticmethod
    def _totals(username, project_count, all_tasks, my_open, today) -> dict[str, Any]:
        stats = task_stats(all_tasks, today)
        return {
            "username": username,
            "total_projects": project_count,
            "total_tasks": stats["total_tasks"],
            "completed_tasks": stats["completed_tasks"],
            "in_progress_tasks": stats["by_status"][TaskStatus.IN_PROGRESS.value],
            "overdue_tasks": stats["overdue_tasks"],
            "my_open_tasks": my_open,
            "completion_rate": stats["completion_rate"],
        }
