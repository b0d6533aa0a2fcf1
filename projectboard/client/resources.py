"""Resource groups of the API client: one method per backend operation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote

if TYPE_CHECKING:
    from projectboard.client.api import ApiClient


def _seg(value: Any) -> str:
    """Encode one path segment."""
    return quote(str(value), safe="")


class _Resource:
    def __init__(self, client: "ApiClient"):
        self._client = client

    def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return self._client.request("GET", path, params=params)

    def _post(self, path: str, json: Any = None) -> Any:
        return self._client.request("POST", path, json=json)

    def _put(self, path: str, json: Any = None) -> Any:
        return self._client.request("PUT", path, json=json)

    def _patch(self, path: str, json: Any = None) -> Any:
        return self._client.request("PATCH", path, json=json)

    def _delete(self, path: str) -> Any:
        return self._client.request("DELETE", path)


class AuthApi(_Resource):
    def signup(self, username: str, password: str, email: Optional[str] = None) -> Any:
        return self._post("/auth/signup", {"username": username, "password": password, "email": email})

    def login(self, username: str, password: str) -> Any:
        """Log in and store the returned token (and user) on the client session."""
        data = self._post("/auth/login", {"username": username, "password": password})
        token = data.get("access_token") if isinstance(data, dict) else None
        if token:
            self._client.session.set_token(token, data.get("user"))
        return data

    def logout(self) -> Any:
        """Invalidate the server session; the local token is cleared even if the call fails."""
        try:
            return self._post("/auth/logout")
        finally:
            self._client.session.clear_token()

    def verify(self) -> Any:
        return self._get("/auth/verify")

    def get_me(self) -> Any:
        return self._get("/auth/me")


class ProjectsApi(_Resource):
    def list(self) -> Any:
        return self._get("/projects")

    def get(self, project_id: str) -> Any:
        return self._get(f"/projects/{_seg(project_id)}")

    def create(self, payload: dict[str, Any]) -> Any:
        return self._post("/projects", payload)

    def update(self, project_id: str, payload: dict[str, Any]) -> Any:
        return self._put(f"/projects/{_seg(project_id)}", payload)

    def delete(self, project_id: str) -> Any:
        return self._delete(f"/projects/{_seg(project_id)}")

    def get_stats(self, project_id: str) -> Any:
        return self._get(f"/projects/{_seg(project_id)}/stats")


class TasksApi(_Resource):
    @staticmethod
    def _base(project_id: str) -> str:
        return f"/projects/{_seg(project_id)}/tasks"

    def list(self, project_id: str) -> Any:
        return self._get(self._base(project_id))

    def get(self, project_id: str, task_id: str) -> Any:
        return self._get(f"{self._base(project_id)}/{_seg(task_id)}")

    def create(self, project_id: str, payload: dict[str, Any]) -> Any:
        return self._post(self._base(project_id), payload)

    def update(self, project_id: str, task_id: str, payload: dict[str, Any]) -> Any:
        return self._put(f"{self._base(project_id)}/{_seg(task_id)}", payload)

    def update_status(self, project_id: str, task_id: str, status: str) -> Any:
        return self._patch(f"{self._base(project_id)}/{_seg(task_id)}/status", {"status": status})

    def delete(self, project_id: str, task_id: str) -> Any:
        return self._delete(f"{self._base(project_id)}/{_seg(task_id)}")


class MembersApi(_Resource):
    @staticmethod
    def _base(project_id: str) -> str:
        return f"/projects/{_seg(project_id)}/members"

    def list(self, project_id: str) -> Any:
        return self._get(self._base(project_id))

    def get(self, project_id: str, username: str) -> Any:
        return self._get(f"{self._base(project_id)}/{_seg(username)}")

    def add(self, project_id: str, username: str, role: str) -> Any:
        return self._post(self._base(project_id), {"username": username, "role": role})

    def update_role(self, project_id: str, username: str, role: str) -> Any:
        return self._put(f"{self._base(project_id)}/{_seg(username)}", {"role": role})

    def remove(self, project_id: str, username: str) -> Any:
        return self._delete(f"{self._base(project_id)}/{_seg(username)}")

    def get_permissions(self, project_id: str, username: str) -> Any:
        return self._get(f"{self._base(project_id)}/{_seg(username)}/permissions")


class AnalyticsApi(_Resource):
    def get(self, project_id: str) -> Any:
        return self._get(f"/projects/{_seg(project_id)}/analytics")

    def get_timeline(self, project_id: str, days: int = 30) -> Any:
        return self._get(f"/projects/{_seg(project_id)}/analytics/timeline", params={"days": days})

    def get_member_analytics(self, project_id: str, username: str) -> Any:
        return self._get(f"/projects/{_seg(project_id)}/analytics/member/{_seg(username)}")


class DashboardApi(_Resource):
    def get_summary(self) -> Any:
        return self._get("/dashboard")

    def get_quick_summary(self) -> Any:
        return self._get("/dashboard/summary")

    def get_recent_activity(self, limit: int = 10) -> Any:
        return self._get("/dashboard/recent-activity", params={"limit": limit})
