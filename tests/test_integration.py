"""End-to-end: the API client talking to the real FastAPI app.

The client's ``requests.Session`` gets an adapter that forwards every
prepared request to FastAPI's TestClient, so both halves run for real
against a temp SQLite database without opening a socket.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

import requests
from fastapi.testclient import TestClient
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from projectboard.client import ApiClient, ApiError, resolve_client_config
from projectboard.config import Settings
from projectboard.db.session_repo import SessionRepository
from server.app import create_app

_HOP_HEADERS = {"connection", "content-length", "host"}


class AppAdapter(BaseAdapter):
    """Transport adapter that serves requests from an in-process ASGI app."""

    def __init__(self, test_client: TestClient):
        super().__init__()
        self._tc = test_client
        self.sent: list[requests.PreparedRequest] = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        headers = {k: v for k, v in request.headers.items() if k.lower() not in _HOP_HEADERS}
        r = self._tc.request(request.method, request.path_url, content=request.body, headers=headers)

        resp = requests.Response()
        resp.status_code = r.status_code
        resp._content = r.content
        resp.headers = CaseInsensitiveDict(r.headers)
        resp.encoding = "utf-8"
        resp.reason = r.reason_phrase
        resp.url = request.url
        resp.request = request
        return resp

    def close(self):
        pass


class TestClientAgainstApp(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.app = create_app(Settings(DATABASE_PATH=Path(tmp.name) / "client.db", BCRYPT_ROUNDS=4))
        self._ctx = TestClient(self.app)
        test_client = self._ctx.__enter__()
        self.addCleanup(self._ctx.__exit__, None, None, None)

        self.adapter = AppAdapter(test_client)
        self.client = ApiClient(config=resolve_client_config(base_url="http://testserver", env={}))
        self.client.http.mount("http://", self.adapter)
        self.addCleanup(self.client.close)

        self.expired = []
        self.client.on_session_expired(self.expired.append)

    def test_full_workflow(self):
        self.client.auth.signup("alice", "secret123", "alice@example.com")
        self.client.auth.login("alice", "secret123")
        self.assertTrue(self.client.session.is_authenticated)

        project = self.client.projects.create({"name": "Website Redesign", "description": "Q3"})
        pid = project["project_id"]
        self.assertEqual(project["role"], "owner")

        task = self.client.tasks.create(pid, {"title": "Landing page", "priority": "high"})
        done = self.client.tasks.update_status(pid, task["task_id"], "done")
        self.assertEqual(done["status"], "done")

        stats = self.client.projects.get_stats(pid)
        self.assertEqual(stats["completion_rate"], 100.0)
        timeline = self.client.analytics.get_timeline(pid)
        self.assertEqual(len(timeline["timeline"]), 30)
        self.assertEqual(self.client.dashboard.get_quick_summary()["total_projects"], 1)
        self.assertGreaterEqual(self.client.dashboard.get_recent_activity()["count"], 3)

        self.client.auth.logout()
        self.assertFalse(self.client.session.is_authenticated)

    def test_server_error_detail_reaches_caller(self):
        self.client.auth.signup("alice", "secret123")
        self.client.auth.login("alice", "secret123")
        with self.assertRaises(ApiError) as ctx:
            self.client.projects.get("no-such-project")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.detail, "Project not found")
        self.assertTrue(self.client.session.is_authenticated)

    def test_revoked_session_logs_client_out(self):
        self.client.auth.signup("alice", "secret123")
        self.client.auth.login("alice", "secret123")
        self.assertEqual(self.client.projects.list(), [])
        self.assertTrue(self.adapter.sent[-1].headers["Authorization"].startswith("Bearer "))

        # Server-side invalidation, as if the session expired.
        SessionRepository(self.app.state.db).delete_for_user("alice")

        with self.assertRaises(ApiError) as ctx:
            self.client.projects.list()
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.detail, "Invalid or expired token")
        self.assertFalse(self.client.session.is_authenticated)
        self.assertEqual(len(self.expired), 1)
        self.assertEqual(self.expired[0].login_path, "/login")

        with self.assertRaises(ApiError):
            self.client.projects.list()
        self.assertNotIn("Authorization", self.adapter.sent[-1].headers)
        self.assertEqual(self.expired[0].status_code, 401)


if __name__ == "__main__":
    unittest.main()
