"""Project membership: a user's role within one project."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from projectboard.models.common import utc_now


class MemberRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    DEVELOPER = "developer"
    DESIGNER = "designer"
    QA = "qa"
    MEMBER = "member"


class Permission(str, Enum):
    VIEW_PROJECT = "view_project"
    UPDATE_TASK_STATUS = "update_task_status"
    CREATE_TASKS = "create_tasks"
    EDIT_TASKS = "edit_tasks"
    DELETE_TASKS = "delete_tasks"
    MANAGE_MEMBERS = "manage_members"
    EDIT_PROJECT = "edit_project"
    DELETE_PROJECT = "delete_project"


_CONTRIBUTOR = frozenset({
    Permission.VIEW_PROJECT,
    Permission.UPDATE_TASK_STATUS,
    Permission.CREATE_TASKS,
    Permission.EDIT_TASKS,
})

_MANAGER = _CONTRIBUTOR | {Permission.DELETE_TASKS, Permission.MANAGE_MEMBERS}

ROLE_PERMISSIONS: dict[MemberRole, frozenset[Permission]] = {
    MemberRole.OWNER: frozenset(Permission),
    MemberRole.ADMIN: _MANAGER | {Permission.EDIT_PROJECT},
    MemberRole.MANAGER: _MANAGER,
    MemberRole.DEVELOPER: _CONTRIBUTOR,
    MemberRole.DESIGNER: _CONTRIBUTOR,
    MemberRole.QA: _CONTRIBUTOR,
    MemberRole.MEMBER: frozenset({Permission.VIEW_PROJECT, Permission.UPDATE_TASK_STATUS}),
}


@dataclass
class ProjectMember:
    project_id: str
    username: str
    role: MemberRole = MemberRole.MEMBER
    joined_at: str = field(default_factory=utc_now)

    def can(self, permission: Permission) -> bool:
        return permission in ROLE_PERMISSIONS[self.role]

    def permissions(self) -> dict[str, bool]:
        granted = ROLE_PERMISSIONS[self.role]
        return {p.value: p in granted for p in Permission}

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "username": self.username,
            "role": self.role.value,
            "joined_at": self.joined_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ProjectMember":
        return cls(
            project_id=row["project_id"],
            username=row["username"],
            role=MemberRole(row.get("role", "member")),
            joined_at=row.get("joined_at", ""),
        )
