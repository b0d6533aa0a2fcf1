"""Project access checks shared by every project-scoped service."""

from __future__ import annotations

from typing import Optional

from projectboard.db.database import Database
from projectboard.db.member_repo import MemberRepository
from projectboard.db.project_repo import ProjectRepository
from projectboard.models.member import Permission, ProjectMember
from projectboard.models.project import Project
from projectboard.errors import NotFoundError, PermissionDeniedError


class ProjectAccess:
    def __init__(self, db: Database):
        self._projects = ProjectRepository(db)
        self._members = MemberRepository(db)

    def require(
        self,
        project_id: str,
        username: str,
        permission: Optional[Permission] = None,
    ) -> tuple[Project, ProjectMember]:
        """
        Return the project and the caller's membership, or raise.

        Missing project is a 404, non-members and insufficient roles are 403.
        """
        project = self._projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        membership = self._members.get(project_id, username)
        if membership is None:
            raise PermissionDeniedError("You are not a member of this project")
        if permission is not None and not membership.can(permission):
            raise PermissionDeniedError(f"Permission denied: {permission.value}")
        return project, membership
