#!/usr/bin/env python3
"""Initialize the database and optionally seed users and projects from a YAML file.

Seed file layout::

    users:
      - {username: alice, password: secret1, email: alice@example.com}
    projects:
      - name: Website relaunch
        owner: alice
        members: [{username: bob, role: developer}]
        tasks: [{title: Draft sitemap, assignee: bob, priority: high}]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from projectboard.db.database import Database
from projectboard.services.auth_service import AuthService
from projectboard.errors import ServiceError
from projectboard.services.member_service import MemberService
from projectboard.services.project_service import ProjectService
from projectboard.services.task_service import TaskService


def main():
    parser = argparse.ArgumentParser(description="Initialize the database")
    parser.add_argument("--seed", type=str, help="YAML file with users/projects to create")
    parser.add_argument("--db-path", type=str, help="Override database path")
    args = parser.parse_args()

    db_path = Path(args.db_path) if args.db_path else None
    db = Database(path=db_path)
    db.init()
    print(f"Database initialized at: {db.path}")

    if args.seed:
        seed(db, Path(args.seed))

    db.close()
    print("Done.")


def seed(db: Database, path: Path) -> None:
    import yaml
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    auth = AuthService(db)
    for u in data.get("users", []):
        try:
            auth.signup(u["username"], u["password"], email=u.get("email"), full_name=u.get("full_name"))
            print(f"  Created user: {u['username']}")
        except ServiceError as e:
            print(f"  Skipping user {u.get('username', '?')}: {e.detail}")

    projects, members, tasks = ProjectService(db), MemberService(db), TaskService(db)
    for p in data.get("projects", []):
        owner = p["owner"]
        try:
            project = projects.create_project(owner, name=p["name"], description=p.get("description", ""))
        except ServiceError as e:
            print(f"  Skipping project {p.get('name', '?')}: {e.detail}")
            continue
        project_id = project["project_id"]
        print(f"  Created project: {p['name']} ({project_id})")

        for m in p.get("members", []):
            try:
                members.add_member(project_id, m["username"], m.get("role", "member"), owner)
            except ServiceError as e:
                print(f"    Skipping member {m.get('username', '?')}: {e.detail}")
        for t in p.get("tasks", []):
            try:
                tasks.create_task(
                    project_id, owner,
                    title=t["title"],
                    description=t.get("description", ""),
                    status=t.get("status", "todo"),
                    priority=t.get("priority", "medium"),
                    assignee=t.get("assignee"),
                    due_date=t.get("due_date"),
                    labels=t.get("labels"),
                )
            except ServiceError as e:
                print(f"    Skipping task {t.get('title', '?')}: {e.detail}")


if __name__ == "__main__":
    main()
