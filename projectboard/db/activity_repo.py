"""Repository for the ``activity_log`` table (audit trail)."""

from __future__ import annotations

from typing import Optional

from projectboard.db.database import Database
from projectboard.models.activity import Activity


class ActivityRepository:
    def __init__(self, db: Database):
        self._db = db

    def log(
        self,
        username: str,
        action: str,
        subject: str,
        project_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> Activity:
        entry = Activity(
            username=username,
            action=action,
            subject=subject,
            project_id=project_id,
            subject_id=subject_id,
            message=message,
        )
        with self._db.transaction() as conn:
            conn.execute(
                """INSERT INTO activity_log
                   (id, project_id, username, action, subject, subject_id, message, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    entry.id, entry.project_id, entry.username, entry.action,
                    entry.subject, entry.subject_id, entry.message, entry.created_at,
                ),
            )
        return entry

    def for_project(self, project_id: str, limit: int = 20) -> list[Activity]:
        rows = self._db.fetchall(
            """SELECT * FROM activity_log WHERE project_id = ?
               ORDER BY created_at DESC, rowid DESC LIMIT ?""",
            (project_id, limit),
        )
        return [Activity.from_row(r) for r in rows]

    def recent_for_user(self, username: str, limit: int = 10) -> list[Activity]:
        """Most recent activity across every project ``username`` belongs to."""
        rows = self._db.fetchall(
            """SELECT a.* FROM activity_log a
               JOIN project_members m ON m.project_id = a.project_id
               WHERE m.username = ?
               ORDER BY a.created_at DESC, a.rowid DESC LIMIT ?""",
            (username, limit),
        )
        return [Activity.from_row(r) for r in rows]
