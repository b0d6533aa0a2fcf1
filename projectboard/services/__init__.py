"""Services module"""
from projectboard.errors import (
    ServiceError,
    BadRequestError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    ConflictError,
)
from .auth_service import AuthService
from .project_service import ProjectService
from .task_service import TaskService
from .member_service import MemberService
from .analytics_service import AnalyticsService
from .dashboard_service import DashboardService

__all__ = [
    "ServiceError", "BadRequestError", "AuthenticationError",
    "PermissionDeniedError", "NotFoundError", "ConflictError",
    "AuthService", "ProjectService", "TaskService", "MemberService",
    "AnalyticsService", "DashboardService",
]
