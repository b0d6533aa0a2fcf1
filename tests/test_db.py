"""Unit tests for the DB layer: models, schema, and all repositories.

Every test uses a fresh temporary SQLite database so tests are isolated.
"""

from __future__ import annotations

import sqlite3
import tempfile
import threading
import unittest
from pathlib import Path

from projectboard.db.activity_repo import ActivityRepository
from projectboard.db.database import Database
from projectboard.db.member_repo import MemberRepository
from projectboard.db.project_repo import ProjectRepository
from projectboard.db.session_repo import SessionRepository
from projectboard.db.task_repo import TaskRepository
from projectboard.db.user_repo import UserRepository
from projectboard.errors import ConflictError
from projectboard.models.member import MemberRole, Permission, ProjectMember
from projectboard.models.project import Project, ProjectStatus
from projectboard.models.task import Task, TaskPriority, TaskStatus
from projectboard.models.user import User


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_db(case: unittest.TestCase) -> Database:
    """Return a Database in a temp directory that is removed after ``case`` finishes."""
    tmp = tempfile.TemporaryDirectory()
    case.addCleanup(tmp.cleanup)
    db = Database(path=Path(tmp.name) / "test.db")
    db.init()
    return db


def _user(username: str = "alice", **overrides) -> User:
    defaults = dict(username=username, password_hash="salt:hash", email=f"{username}@example.com")
    defaults.update(overrides)
    return User(**defaults)


def _task(project_id: str, **overrides) -> Task:
    defaults = dict(
        project_id=project_id,
        title="Fix login bug",
        description="The login form crashes on empty password",
        priority=TaskPriority.HIGH,
        labels=["bug", "frontend"],
    )
    defaults.update(overrides)
    return Task(**defaults)


# ===========================================================================
# 1. Database core
# ===========================================================================

class TestDatabaseCore(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)

    def tearDown(self):
        self.db.close()

    def test_tables_created(self):
        tables = self.db.fetchall("SELECT name FROM sqlite_master WHERE type='table'")
        names = {t["name"] for t in tables}
        expected = {"users", "sessions", "projects", "project_members", "tasks", "activity_log"}
        self.assertTrue(expected.issubset(names), f"Missing tables: {expected - names}")

    def test_foreign_keys_enabled(self):
        row = self.db.fetchone("PRAGMA foreign_keys")
        self.assertEqual(row["foreign_keys"], 1)

    def test_init_is_idempotent(self):
        self.db.init()
        self.db.init()

    def test_transaction_rollback(self):
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    "INSERT INTO users (user_id, username, password_hash) VALUES (?, ?, ?)",
                    ("u1", "rollback", "x:y"),
                )
                raise ValueError("Force rollback")
        except ValueError:
            pass
        self.assertIsNone(self.db.fetchone("SELECT * FROM users WHERE username = 'rollback'"))

    def test_duplicate_key_becomes_conflict(self):
        with self.db.transaction() as conn:
            conn.execute(
                "INSERT INTO users (user_id, username, password_hash) VALUES (?, ?, ?)",
                ("u1", "alice", "x"),
            )
        with self.assertRaises(ConflictError) as ctx:
            with self.db.transaction() as conn:
                conn.execute(
                    "INSERT INTO users (user_id, username, password_hash) VALUES (?, ?, ?)",
                    ("u2", "alice", "x"),
                )
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(ctx.exception.detail, "Username already exists")
        self.assertIsNone(self.db.fetchone("SELECT * FROM users WHERE user_id = 'u2'"))

    def test_foreign_key_violation_is_not_a_conflict(self):
        with self.assertRaises(sqlite3.IntegrityError):
            SessionRepository(self.db).create("h1", "ghost", "2999-01-01T00:00:00Z")

    def test_concurrent_writers_share_one_connection(self):
        users = UserRepository(self.db)
        errors = []

        def worker(n):
            try:
                for i in range(10):
                    users.create(_user(f"w{n}_{i}"))
            except Exception as e:  # collected for the assertion below
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(errors, [])
        self.assertEqual(len(users.list_all()), 40)

    def test_temp_database_removed_after_test(self):
        directory = self.db.path.parent
        self.db.close()
        self.doCleanups()
        self.assertFalse(directory.exists())


# ===========================================================================
# 2. Users & sessions
# ===========================================================================

class TestUserRepository(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)
        self.repo = UserRepository(self.db)

    def tearDown(self):
        self.db.close()

    def test_create_and_lookup(self):
        self.repo.create(_user("alice"))
        found = self.repo.get_by_username("alice")
        self.assertEqual(found.email, "alice@example.com")
        self.assertEqual(self.repo.get_by_email("alice@example.com").username, "alice")

    def test_duplicate_username_rejected(self):
        self.repo.create(_user("alice"))
        with self.assertRaises(ConflictError) as ctx:
            self.repo.create(_user("alice", email="other@example.com"))
        self.assertEqual(ctx.exception.detail, "Username already exists")

    def test_duplicate_email_rejected(self):
        self.repo.create(_user("alice"))
        with self.assertRaises(ConflictError) as ctx:
            self.repo.create(_user("alice2", email="alice@example.com"))
        self.assertEqual(ctx.exception.detail, "Email already registered")

    def test_public_dict_hides_password_hash(self):
        d = _user("alice").to_dict()
        self.assertNotIn("password_hash", d)
        self.assertEqual(d["username"], "alice")

    def test_users_without_email_do_not_collide(self):
        self.repo.create(_user("a1", email=None))
        self.repo.create(_user("a2", email=None))
        self.assertEqual(len(self.repo.list_all()), 2)


class TestSessionRepository(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)
        UserRepository(self.db).create(_user("alice"))
        self.repo = SessionRepository(self.db)

    def tearDown(self):
        self.db.close()

    def test_create_get_delete(self):
        self.repo.create("h1", "alice", "2999-01-01T00:00:00Z")
        self.assertEqual(self.repo.get("h1")["username"], "alice")
        self.assertTrue(self.repo.delete("h1"))
        self.assertIsNone(self.repo.get("h1"))
        self.assertFalse(self.repo.delete("h1"))

    def test_delete_expired(self):
        self.repo.create("old", "alice", "2000-01-01T00:00:00Z")
        self.repo.create("new", "alice", "2999-01-01T00:00:00Z")
        self.assertEqual(self.repo.delete_expired("2024-01-01T00:00:00Z"), 1)
        self.assertIsNotNone(self.repo.get("new"))


# ===========================================================================
# 3. Projects & members
# ===========================================================================

class TestProjectRepository(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)
        users = UserRepository(self.db)
        users.create(_user("alice"))
        users.create(_user("bob"))
        self.repo = ProjectRepository(self.db)
        self.members = MemberRepository(self.db)

    def tearDown(self):
        self.db.close()

    def test_create_adds_owner_membership(self):
        p = self.repo.create(Project(name="Website", owner="alice"))
        owner = self.members.get(p.project_id, "alice")
        self.assertEqual(owner.role, MemberRole.OWNER)

    def test_list_for_user_only_returns_memberships(self):
        p1 = self.repo.create(Project(name="Mine", owner="alice"))
        self.repo.create(Project(name="Bob's", owner="bob"))
        listed = self.repo.list_for_user("alice")
        self.assertEqual([p.project_id for p, _ in listed], [p1.project_id])
        self.assertEqual(listed[0][1], "owner")

    def test_update_partial(self):
        p = self.repo.create(Project(name="Website", owner="alice", description="old"))
        updated = self.repo.update(p.project_id, status=ProjectStatus.ON_HOLD.value, bogus="x")
        self.assertEqual(updated.status, ProjectStatus.ON_HOLD)
        self.assertEqual(updated.description, "old")

    def test_delete_cascades(self):
        p = self.repo.create(Project(name="Website", owner="alice"))
        TaskRepository(self.db).create(_task(p.project_id))
        ActivityRepository(self.db).log("alice", "created", "project", project_id=p.project_id)
        self.assertTrue(self.repo.delete(p.project_id))
        self.assertEqual(self.db.fetchall("SELECT * FROM tasks"), [])
        self.assertEqual(self.db.fetchall("SELECT * FROM project_members"), [])
        self.assertEqual(self.db.fetchall("SELECT * FROM activity_log"), [])


class TestMemberRepository(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)
        users = UserRepository(self.db)
        users.create(_user("alice"))
        users.create(_user("bob", full_name="Bob Stone"))
        self.project = ProjectRepository(self.db).create(Project(name="Website", owner="alice"))
        self.repo = MemberRepository(self.db)

    def tearDown(self):
        self.db.close()

    def test_add_and_list_with_profile(self):
        self.repo.add(ProjectMember(self.project.project_id, "bob", MemberRole.DEVELOPER))
        rows = self.repo.list_for_project(self.project.project_id)
        self.assertEqual({r["username"] for r in rows}, {"alice", "bob"})
        bob = next(r for r in rows if r["username"] == "bob")
        self.assertEqual(bob["full_name"], "Bob Stone")
        self.assertEqual(self.repo.count(self.project.project_id), 2)

    def test_duplicate_membership_rejected(self):
        self.repo.add(ProjectMember(self.project.project_id, "bob"))
        with self.assertRaises(ConflictError) as ctx:
            self.repo.add(ProjectMember(self.project.project_id, "bob"))
        self.assertEqual(ctx.exception.detail, "User is already a member of this project")

    def test_update_role(self):
        self.repo.add(ProjectMember(self.project.project_id, "bob"))
        m = self.repo.update_role(self.project.project_id, "bob", MemberRole.MANAGER)
        self.assertEqual(m.role, MemberRole.MANAGER)

    def test_remove_unassigns_tasks(self):
        pid = self.project.project_id
        self.repo.add(ProjectMember(pid, "bob"))
        tasks = TaskRepository(self.db)
        t = tasks.create(_task(pid, assignee="bob"))
        self.assertTrue(self.repo.remove(pid, "bob"))
        self.assertIsNone(tasks.get(pid, t.task_id).assignee)
        self.assertIsNone(self.repo.get(pid, "bob"))


class TestRolePermissions(unittest.TestCase):
    def test_owner_has_everything(self):
        m = ProjectMember("p", "alice", MemberRole.OWNER)
        self.assertTrue(all(m.permissions().values()))

    def test_admin_cannot_delete_project(self):
        m = ProjectMember("p", "alice", MemberRole.ADMIN)
        self.assertTrue(m.can(Permission.EDIT_PROJECT))
        self.assertFalse(m.can(Permission.DELETE_PROJECT))

    def test_member_is_read_mostly(self):
        perms = ProjectMember("p", "bob", MemberRole.MEMBER).permissions()
        self.assertTrue(perms["view_project"])
        self.assertTrue(perms["update_task_status"])
        self.assertFalse(perms["create_tasks"])
        self.assertFalse(perms["manage_members"])


# ===========================================================================
# 4. Tasks & activity
# ===========================================================================

class TestTaskRepository(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)
        users = UserRepository(self.db)
        users.create(_user("alice"))
        users.create(_user("bob"))
        projects = ProjectRepository(self.db)
        self.p1 = projects.create(Project(name="One", owner="alice")).project_id
        self.p2 = projects.create(Project(name="Two", owner="bob")).project_id
        self.repo = TaskRepository(self.db)

    def tearDown(self):
        self.db.close()

    def test_create_and_get_scoped_to_project(self):
        t = self.repo.create(_task(self.p1))
        got = self.repo.get(self.p1, t.task_id)
        self.assertEqual(got.labels, ["bug", "frontend"])
        self.assertEqual(got.priority, TaskPriority.HIGH)
        self.assertIsNone(self.repo.get(self.p2, t.task_id))

    def test_list_filters(self):
        self.repo.create(_task(self.p1, title="a", status=TaskStatus.DONE, assignee="alice"))
        self.repo.create(_task(self.p1, title="b", priority=TaskPriority.LOW))
        self.repo.create(_task(self.p2, title="c"))
        self.assertEqual(len(self.repo.list_for_project(self.p1)), 2)
        done = self.repo.list_for_project(self.p1, status=TaskStatus.DONE)
        self.assertEqual([t.title for t in done], ["a"])
        low = self.repo.list_for_project(self.p1, priority=TaskPriority.LOW)
        self.assertEqual([t.title for t in low], ["b"])
        self.assertEqual([t.title for t in self.repo.get_by_assignee("alice")], ["a"])

    def test_open_tasks_for_assignee(self):
        self.repo.create(_task(self.p1, title="shipped", status=TaskStatus.DONE, assignee="bob"))
        self.repo.create(_task(self.p1, title="later", assignee="bob", due_date="2030-01-01"))
        self.repo.create(_task(self.p2, title="sooner", assignee="bob", due_date="2029-01-01"))
        self.assertEqual(len(self.repo.get_by_assignee("bob")), 3)
        open_titles = [t.title for t in self.repo.get_by_assignee("bob", open_only=True)]
        self.assertEqual(open_titles, ["sooner", "later"])

    def test_update_labels_and_timestamp(self):
        t = self.repo.create(_task(self.p1, updated_at="2000-01-01T00:00:00Z"))
        updated = self.repo.update(self.p1, t.task_id, labels=["ops"], title="New")
        self.assertEqual(updated.labels, ["ops"])
        self.assertEqual(updated.title, "New")
        self.assertNotEqual(updated.updated_at, "2000-01-01T00:00:00Z")

    def test_delete(self):
        t = self.repo.create(_task(self.p1))
        self.assertFalse(self.repo.delete(self.p2, t.task_id))
        self.assertTrue(self.repo.delete(self.p1, t.task_id))

    def test_is_overdue(self):
        t = _task(self.p1, due_date="2024-01-01")
        self.assertTrue(t.is_overdue("2024-01-02"))
        self.assertFalse(t.is_overdue("2024-01-01"))
        t.status = TaskStatus.DONE
        self.assertFalse(t.is_overdue("2024-06-01"))


class TestActivityRepository(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)
        users = UserRepository(self.db)
        users.create(_user("alice"))
        users.create(_user("bob"))
        projects = ProjectRepository(self.db)
        self.p1 = projects.create(Project(name="One", owner="alice")).project_id
        self.p2 = projects.create(Project(name="Two", owner="bob")).project_id
        self.repo = ActivityRepository(self.db)

    def tearDown(self):
        self.db.close()

    def test_recent_for_user_only_sees_own_projects(self):
        self.repo.log("alice", "created", "task", project_id=self.p1, message="first")
        self.repo.log("alice", "updated", "task", project_id=self.p1, message="second")
        self.repo.log("bob", "created", "task", project_id=self.p2, message="hidden")
        recent = self.repo.recent_for_user("alice", limit=10)
        self.assertEqual([a.message for a in recent], ["second", "first"])

    def test_limit(self):
        for i in range(5):
            self.repo.log("alice", "created", "task", project_id=self.p1, message=str(i))
        self.assertEqual(len(self.repo.recent_for_user("alice", limit=3)), 3)
        self.assertEqual(len(self.repo.for_project(self.p1, limit=2)), 2)


# ===========================================================================
# 5. Seeding
# ===========================================================================

class TestSeed(unittest.TestCase):
    def setUp(self):
        self.db = _make_db(self)

    def tearDown(self):
        self.db.close()

    def test_seed_example_file(self):
        from scripts.init_db import seed

        seed_file = Path(__file__).resolve().parents[1] / "scripts" / "seed_example.yaml"
        seed(self.db, seed_file)

        self.assertEqual(len(UserRepository(self.db).list_all()), 3)
        projects = ProjectRepository(self.db).list_for_user("carol")
        self.assertEqual(len(projects), 1)
        project, role = projects[0]
        self.assertEqual(role, "qa")
        tasks = TaskRepository(self.db).list_for_project(project.project_id)
        self.assertEqual(len(tasks), 3)
        done = [t for t in tasks if t.status == TaskStatus.DONE]
        self.assertIsNotNone(done[0].completed_at)

    def test_seed_is_rerunnable(self):
        from scripts.init_db import seed

        seed_file = Path(__file__).resolve().parents[1] / "scripts" / "seed_example.yaml"
        seed(self.db, seed_file)
        seed(self.db, seed_file)
        self.assertEqual(len(UserRepository(self.db).list_all()), 3)


if __name__ == "__main__":
    unittest.main()
