"""Repository for the ``tasks`` table: full CRUD with ACID transactions."""

from __future__ import annotations

import json
from typing import Any, Optional

from projectboard.db.database import Database
from projectboard.models.common import utc_now
from projectboard.models.task import Task, TaskPriority, TaskStatus


class TaskRepository:
    """Single-Responsibility repository for task persistence."""

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    def create(self, task: Task) -> Task:
        with self._db.transaction() as conn:
            conn.execute(
                """INSERT INTO tasks
                   (task_id, project_id, title, description, status, priority,
                    assignee, due_date, labels, created_by,
                    created_at, updated_at, completed_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    task.task_id, task.project_id, task.title, task.description,
                    task.status.value, task.priority.value,
                    task.assignee, task.due_date, task.labels_json(), task.created_by,
                    task.created_at, task.updated_at, task.completed_at,
                ),
            )
        return task

    # -- Read ------------------------------------------------------------------

    def get(self, project_id: str, task_id: str) -> Optional[Task]:
        row = self._db.fetchone(
            "SELECT * FROM tasks WHERE project_id = ? AND task_id = ?",
            (project_id, task_id),
        )
        return Task.from_row(row) if row else None

    def get_by_assignee(self, username: str, open_only: bool = False) -> list[Task]:
        """Tasks assigned to ``username`` across every project, soonest due first."""
        sql = "SELECT * FROM tasks WHERE assignee = ?"
        if open_only:
            sql += " AND status != 'done'"
        rows = self._db.fetchall(sql + " ORDER BY due_date ASC NULLS LAST, created_at", (username,))
        return [Task.from_row(r) for r in rows]

    # -- List / Filter ---------------------------------------------------------

    def list_for_project(
        self,
        project_id: str,
        status: Optional[TaskStatus] = None,
        assignee: Optional[str] = None,
        priority: Optional[TaskPriority] = None,
    ) -> list[Task]:
        clauses: list[str] = ["project_id = ?"]
        params: list[Any] = [project_id]
        if status:
            clauses.append("status = ?")
            params.append(status.value)
        if assignee:
            clauses.append("assignee = ?")
            params.append(assignee)
        if priority:
            clauses.append("priority = ?")
            params.append(priority.value)

        rows = self._db.fetchall(
            f"SELECT * FROM tasks WHERE {' AND '.join(clauses)} "
            "ORDER BY due_date ASC NULLS LAST, created_at DESC",
            tuple(params),
        )
        return [Task.from_row(r) for r in rows]

    def list_for_user_projects(self, username: str) -> list[Task]:
        """Every task in every project ``username`` belongs to."""
        rows = self._db.fetchall(
            """SELECT t.* FROM tasks t
               JOIN project_members m ON m.project_id = t.project_id
               WHERE m.username = ?""",
            (username,),
        )
        return [Task.from_row(r) for r in rows]

    # -- Update ----------------------------------------------------------------

    def update(self, project_id: str, task_id: str, **fields: Any) -> Optional[Task]:
        allowed = {
            "title", "description", "status", "priority",
            "assignee", "due_date", "labels", "completed_at",
        }
        filtered = {k: v for k, v in fields.items() if k in allowed}
        if not filtered:
            return self.get(project_id, task_id)

        if "labels" in filtered and isinstance(filtered["labels"], list):
            filtered["labels"] = json.dumps(filtered["labels"])

        set_parts = [f"{k} = ?" for k in filtered]
        set_parts.append("updated_at = ?")
        values = list(filtered.values())
        values.append(utc_now())
        values.extend([project_id, task_id])

        with self._db.transaction() as conn:
            conn.execute(
                f"UPDATE tasks SET {', '.join(set_parts)} WHERE project_id = ? AND task_id = ?",
                tuple(values),
            )
        return self.get(project_id, task_id)

    # -- Delete ----------------------------------------------------------------

    def delete(self, project_id: str, task_id: str) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM tasks WHERE project_id = ? AND task_id = ?", (project_id, task_id)
            )
        return cursor.rowcount > 0
