"""Repository for the ``project_members`` table."""

from __future__ import annotations

from typing import Any, Optional

from projectboard.db.database import Database
from projectboard.models.member import MemberRole, ProjectMember


class MemberRepository:
    def __init__(self, db: Database):
        self._db = db

    def add(self, member: ProjectMember) -> ProjectMember:
        """Insert a membership. Raises on duplicate (project_id, username)."""
        with self._db.transaction() as conn:
            conn.execute(
                """INSERT INTO project_members (project_id, username, role, joined_at)
                   VALUES (?, ?, ?, ?)""",
                (member.project_id, member.username, member.role.value, member.joined_at),
            )
        return member

    def get(self, project_id: str, username: str) -> Optional[ProjectMember]:
        row = self._db.fetchone(
            "SELECT * FROM project_members WHERE project_id = ? AND username = ?",
            (project_id, username),
        )
        return ProjectMember.from_row(row) if row else None

    def list_for_project(self, project_id: str) -> list[dict[str, Any]]:
        """Memberships joined with the user's public profile fields."""
        return self._db.fetchall(
            """SELECT m.project_id, m.username, m.role, m.joined_at,
                      u.email, u.full_name
               FROM project_members m
               LEFT JOIN users u ON u.username = m.username
               WHERE m.project_id = ?
               ORDER BY m.joined_at, m.username""",
            (project_id,),
        )

    def count(self, project_id: str) -> int:
        row = self._db.fetchone(
            "SELECT COUNT(*) AS n FROM project_members WHERE project_id = ?", (project_id,)
        )
        return row["n"] if row else 0

    def update_role(self, project_id: str, username: str, role: MemberRole) -> Optional[ProjectMember]:
        with self._db.transaction() as conn:
            conn.execute(
                "UPDATE project_members SET role = ? WHERE project_id = ? AND username = ?",
                (role.value, project_id, username),
            )
        return self.get(project_id, username)

    def remove(self, project_id: str, username: str) -> bool:
        """Delete the membership and unassign the member's tasks in the project."""
        with self._db.transaction() as conn:
            conn.execute(
                "UPDATE tasks SET assignee = NULL WHERE project_id = ? AND assignee = ?",
                (project_id, username),
            )
            cursor = conn.execute(
                "DELETE FROM project_members WHERE project_id = ? AND username = ?",
                (project_id, username),
            )
        return cursor.rowcount > 0
