"""Domain models for the project board."""

from projectboard.models.user import User
from projectboard.models.project import Project, ProjectStatus
from projectboard.models.member import ProjectMember, MemberRole, Permission, ROLE_PERMISSIONS
from projectboard.models.task import Task, TaskStatus, TaskPriority
from projectboard.models.activity import Activity

__all__ = [
    "User",
    "Project", "ProjectStatus",
    "ProjectMember", "MemberRole", "Permission", "ROLE_PERMISSIONS",
    "Task", "TaskStatus", "TaskPriority",
    "Activity",
]
