"""
HTTP core of the API client.

Every request carries ``Authorization: Bearer <token>`` while a token is
stored. Every 401 response, whichever call triggered it, clears the session
and publishes a ``SessionExpired`` event to subscribers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from requests.auth import AuthBase

from projectboard.client.config import ClientConfig, resolve_client_config
from projectboard.client.resources import (
    AnalyticsApi,
    AuthApi,
    DashboardApi,
    MembersApi,
    ProjectsApi,
    TasksApi,
)
from projectboard.client.session import AuthSession

logger = logging.getLogger(__name__)


class ApiError(requests.HTTPError):
    """A non-2xx response, carrying the server's status and ``detail`` unmodified."""

    def __init__(self, status_code: int, detail: Any, response: Optional[requests.Response] = None):
        super().__init__(f"{status_code}: {detail}", response=response)
        self.status_code = status_code
        self.detail = detail

    @classmethod
    def from_response(cls, response: requests.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and "detail" in body:
            detail = body["detail"]
        else:
            detail = response.text or response.reason
        return cls(response.status_code, detail, response=response)


@dataclass(frozen=True)
class SessionExpired:
    status_code: int
    url: str
    login_path: str


SessionExpiredListener = Callable[[SessionExpired], None]


class BearerAuth(AuthBase):
    """Attach the session's current token, if any, to each outgoing request."""

    def __init__(self, session: AuthSession):
        self._session = session

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        token = self._session.get_token()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return request


class ApiClient:
    """
    Project board API client.

    Resource groups hang off the instance::

        client = ApiClient()
        client.auth.login("alice", "secret")
        client.projects.list()
        client.tasks.update_status(project_id, task_id, "done")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[AuthSession] = None,
        http: Optional[requests.Session] = None,
    ):
        self.config = config or resolve_client_config()
        self.session = session or AuthSession()
        self.http = http or requests.Session()
        self.http.auth = BearerAuth(self.session)
        self.http.headers.update({"Accept": "application/json"})
        self.http.hooks["response"].append(self._on_response)
        self._listeners: list[SessionExpiredListener] = []

        self.auth = AuthApi(self)
        self.projects = ProjectsApi(self)
        self.tasks = TasksApi(self)
        self.members = MembersApi(self)
        self.analytics = AnalyticsApi(self)
        self.dashboard = DashboardApi(self)

        logger.debug(f"ApiClient using {self.config.base_url} ({self.config.source})")

    # -- session-expired subscription -----------------------------------------

    def on_session_expired(self, listener: SessionExpiredListener) -> SessionExpiredListener:
        """Subscribe to session expiry; usable as a decorator."""
        self._listeners.append(listener)
        return listener

    def _on_response(self, response: requests.Response, *args, **kwargs) -> None:
        if response.status_code != 401:
            return
        logger.warning(f"Received 401 from {response.request.method} {response.url}; clearing session")
        self.session.clear_token()
        event = SessionExpired(
            status_code=response.status_code,
            url=response.url,
            login_path=self.config.login_path,
        )
        for listener in list(self._listeners):
            listener(event)

    # -- requests --------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body; raise ``ApiError`` on non-2xx."""
        response = self.http.request(
            method,
            self.config.url(path),
            json=json,
            params=params,
            timeout=self.config.timeout,
        )
        if not response.ok:
            raise ApiError.from_response(response)
        if not response.content:
            return None
        return response.json()

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
