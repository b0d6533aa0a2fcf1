"""Analytics service: read-only aggregates over a project's tasks."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any

from projectboard.db.activity_repo import ActivityRepository
from projectboard.db.database import Database
from projectboard.db.member_repo import MemberRepository
from projectboard.db.task_repo import TaskRepository
from projectboard.models.common import utc_today
from projectboard.models.member import Permission
from projectboard.models.task import TaskPriority, TaskStatus
from projectboard.services.access import ProjectAccess
from projectboard.errors import BadRequestError, NotFoundError
from projectboard.services.project_service import completion_rate, task_stats

MAX_TIMELINE_DAYS = 365


class AnalyticsService:
    def __init__(self, db: Database):
        self._tasks = TaskRepository(db)
        self._members = MemberRepository(db)
        self._activity = ActivityRepository(db)
        self._access = ProjectAccess(db)

    def project_analytics(self, project_id: str, username: str) -> dict[str, Any]:
        project, _ = self._access.require(project_id, username, Permission.VIEW_PROJECT)
        tasks = self._tasks.list_for_project(project_id)
        today = utc_today()

        by_priority = {p.value: 0 for p in TaskPriority}
        for t in tasks:
            by_priority[t.priority.value] += 1

        workload = []
        for m in self._members.list_for_project(project_id):
            mine = [t for t in tasks if t.assignee == m["username"]]
            done = sum(1 for t in mine if t.status == TaskStatus.DONE)
            workload.append({
                "username": m["username"],
                "role": m["role"],
                "assigned_tasks": len(mine),
                "completed_tasks": done,
                "completion_rate": completion_rate(done, len(mine)),
            })

        return {
            "project_id": project.project_id,
            "name": project.name,
            "status": project.status.value,
            "task_summary": task_stats(tasks, today),
            "by_priority": by_priority,
            "unassigned_tasks": sum(1 for t in tasks if not t.assignee),
            "member_workload": workload,
            "recent_activity": [a.to_dict() for a in self._activity.for_project(project_id, limit=10)],
        }

    def timeline(self, project_id: str, username: str, days: int = 30) -> dict[str, Any]:
        """Tasks created and completed per day over the last ``days`` days (today included)."""
        if days < 1 or days > MAX_TIMELINE_DAYS:
            raise BadRequestError(f"days must be between 1 and {MAX_TIMELINE_DAYS}")
        self._access.require(project_id, username, Permission.VIEW_PROJECT)
        tasks = self._tasks.list_for_project(project_id)

        created = Counter(t.created_at[:10] for t in tasks if t.created_at)
        completed = Counter(t.completed_at[:10] for t in tasks if t.completed_at)

        today = datetime.now(timezone.utc).date()
        timeline = []
        for offset in range(days - 1, -1, -1):
            day = (today - timedelta(days=offset)).isoformat()
            timeline.append({"date": day, "created": created[day], "completed": completed[day]})

        return {
            "project_id": project_id,
            "days": days,
            "start_date": timeline[0]["date"],
            "end_date": timeline[-1]["date"],
            "total_created": sum(e["created"] for e in timeline),
            "total_completed": sum(e["completed"] for e in timeline),
            "timeline": timeline,
        }

    def member_analytics(self, project_id: str, target: str, username: str) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.VIEW_PROJECT)
        member = self._members.get(project_id, target)
        if member is None:
            raise NotFoundError("Member not found")

        tasks = self._tasks.list_for_project(project_id, assignee=target)
        stats = task_stats(tasks)
        by_priority = {p.value: 0 for p in TaskPriority}
        for t in tasks:
            by_priority[t.priority.value] += 1

        return {
            "project_id": project_id,
            "username": target,
            "role": member.role.value,
            "assigned_tasks": stats["total_tasks"],
            "completed_tasks": stats["completed_tasks"],
            "in_progress_tasks": stats["by_status"][TaskStatus.IN_PROGRESS.value],
            "overdue_tasks": stats["overdue_tasks"],
            "completion_rate": stats["completion_rate"],
            "by_status": stats["by_status"],
            "by_priority": by_priority,
        }
