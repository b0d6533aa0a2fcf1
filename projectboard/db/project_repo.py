"""Repository for the ``projects`` table."""

from __future__ import annotations

from typing import Any, Optional

from projectboard.db.database import Database
from projectboard.models.common import utc_now
from projectboard.models.member import MemberRole
from projectboard.models.project import Project


class ProjectRepository:
    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    def create(self, project: Project) -> Project:
        """Insert the project and its owner membership in one transaction."""
        with self._db.transaction() as conn:
            conn.execute(
                """INSERT INTO projects
                   (project_id, name, description, status, owner,
                    start_date, end_date, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    project.project_id, project.name, project.description,
                    project.status.value, project.owner,
                    project.start_date, project.end_date,
                    project.created_at, project.updated_at,
                ),
            )
            conn.execute(
                """INSERT INTO project_members (project_id, username, role, joined_at)
                   VALUES (?, ?, ?, ?)""",
                (project.project_id, project.owner, MemberRole.OWNER.value, project.created_at),
            )
        return project

    # -- Read ------------------------------------------------------------------

    def get_by_id(self, project_id: str) -> Optional[Project]:
        row = self._db.fetchone("SELECT * FROM projects WHERE project_id = ?", (project_id,))
        return Project.from_row(row) if row else None

    def list_for_user(self, username: str) -> list[tuple[Project, str]]:
        """Projects the user belongs to, paired with the user's role."""
        rows = self._db.fetchall(
            """SELECT p.*, m.role AS member_role
               FROM projects p
               JOIN project_members m ON m.project_id = p.project_id
               WHERE m.username = ?
               ORDER BY p.created_at DESC, p.name""",
            (username,),
        )
        return [(Project.from_row(r), r["member_role"]) for r in rows]

    # -- Update ----------------------------------------------------------------

    def update(self, project_id: str, **fields: Any) -> Optional[Project]:
        """Only supplied keys are changed; ``updated_at`` is set automatically."""
        allowed = {"name", "description", "status", "start_date", "end_date"}
        filtered = {k: v for k, v in fields.items() if k in allowed}
        if not filtered:
            return self.get_by_id(project_id)

        set_parts = [f"{k} = ?" for k in filtered]
        set_parts.append("updated_at = ?")
        values = list(filtered.values())
        values.append(utc_now())
        values.append(project_id)

        with self._db.transaction() as conn:
            conn.execute(
                f"UPDATE projects SET {', '.join(set_parts)} WHERE project_id = ?",
                tuple(values),
            )
        return self.get_by_id(project_id)

    # -- Delete ----------------------------------------------------------------

    def delete(self, project_id: str) -> bool:
        """Hard delete; members, tasks and activity cascade."""
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM projects WHERE project_id = ?", (project_id,))
        return cursor.rowcount > 0
