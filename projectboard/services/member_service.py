"""Member service: project team membership, roles and derived permissions."""

from __future__ import annotations

import logging
from typing import Any

from projectboard.db.activity_repo import ActivityRepository
from projectboard.db.database import Database
from projectboard.db.member_repo import MemberRepository
from projectboard.db.user_repo import UserRepository
from projectboard.models.member import MemberRole, Permission, ProjectMember
from projectboard.services.access import ProjectAccess
from projectboard.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


def _parse_assignable_role(raw: str) -> MemberRole:
    """Any role except ``owner``, which is only granted at project creation."""
    try:
        role = MemberRole(raw.strip().lower())
    except ValueError:
        role = None
    if role is None or role == MemberRole.OWNER:
        allowed = ", ".join(r.value for r in MemberRole if r != MemberRole.OWNER)
        raise BadRequestError(f"Invalid role: {raw!r}. Expected one of: {allowed}")
    return role


class MemberService:
    def __init__(self, db: Database):
        self._members = MemberRepository(db)
        self._users = UserRepository(db)
        self._activity = ActivityRepository(db)
        self._access = ProjectAccess(db)

    def _require_member(self, project_id: str, username: str) -> ProjectMember:
        member = self._members.get(project_id, username)
        if member is None:
            raise NotFoundError("Member not found")
        return member

    # -- Read ------------------------------------------------------------------

    def list_members(self, project_id: str, username: str) -> list[dict[str, Any]]:
        self._access.require(project_id, username, Permission.VIEW_PROJECT)
        return self._members.list_for_project(project_id)

    def get_member(self, project_id: str, target: str, username: str) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.VIEW_PROJECT)
        member = self._require_member(project_id, target)
        user = self._users.get_by_username(target)
        return {
            **member.to_dict(),
            "email": user.email if user else None,
            "full_name": user.full_name if user else None,
        }

    def get_permissions(self, project_id: str, target: str, username: str) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.VIEW_PROJECT)
        member = self._require_member(project_id, target)
        return {
            "project_id": project_id,
            "username": target,
            "role": member.role.value,
            "permissions": member.permissions(),
        }

    # -- Mutations -------------------------------------------------------------

    def add_member(self, project_id: str, target: str, role: str, username: str) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.MANAGE_MEMBERS)
        parsed = _parse_assignable_role(role)
        if self._users.get_by_username(target) is None:
            raise NotFoundError("User not found")
        if self._members.get(project_id, target) is not None:
            raise ConflictError("User is already a member of this project")

        member = self._members.add(ProjectMember(project_id=project_id, username=target, role=parsed))
        self._activity.log(
            username, "added", "member",
            project_id=project_id, subject_id=target,
            message=f"Added {target} as {parsed.value}",
        )
        logger.info(f"Added {target} to project {project_id} as {parsed.value}")
        return member.to_dict()

    def update_role(self, project_id: str, target: str, role: str, username: str) -> dict[str, Any]:
        self._access.require(project_id, username, Permission.MANAGE_MEMBERS)
        parsed = _parse_assignable_role(role)
        member = self._require_member(project_id, target)
        if member.role == MemberRole.OWNER:
            raise BadRequestError("Cannot change the role of the project owner")

        updated = self._members.update_role(project_id, target, parsed)
        self._activity.log(
            username, "role_changed", "member",
            project_id=project_id, subject_id=target,
            message=f"Changed {target} from {member.role.value} to {parsed.value}",
        )
        return updated.to_dict()

    def remove_member(self, project_id: str, target: str, username: str) -> dict[str, Any]:
        # Members may always leave a project themselves.
        _, caller = self._access.require(project_id, username)
        if target != username and not caller.can(Permission.MANAGE_MEMBERS):
            raise PermissionDeniedError(f"Permission denied: {Permission.MANAGE_MEMBERS.value}")
        member = self._require_member(project_id, target)
        if member.role == MemberRole.OWNER:
            raise BadRequestError("Cannot remove the project owner")

        self._members.remove(project_id, target)
        self._activity.log(
            username, "removed", "member",
            project_id=project_id, subject_id=target,
            message=f"Removed {target} from the project",
        )
        return {"message": f"Member '{target}' removed successfully", "username": target}
