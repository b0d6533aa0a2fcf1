"""Route groups of the API gateway."""

from server.routes import analytics, auth, dashboard, members, projects, tasks

__all__ = ["analytics", "auth", "dashboard", "members", "projects", "tasks"]
