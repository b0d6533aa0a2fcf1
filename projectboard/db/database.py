"""Shared SQLite handle for the project board.

One connection serves the whole process. Requests reach it from the event
loop and from FastAPI's threadpool, so every statement and every
transaction runs under a single re-entrant lock.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from projectboard.db.schema import SCHEMA_DDL
from projectboard.errors import ConflictError

logger = logging.getLogger(__name__)

# Unique/primary-key violations surface to callers as 409s with these messages.
CONFLICT_DETAILS = {
    "users.username": "Username already exists",
    "users.email": "Email already registered",
    "project_members.project_id, project_members.username": "User is already a member of this project",
    "sessions.token_hash": "Session already exists",
}


def conflict_from(error: sqlite3.IntegrityError) -> Optional[ConflictError]:
    """Map a UNIQUE/PRIMARY KEY violation to a ``ConflictError``; other integrity errors map to None."""
    message = str(error)
    if not message.startswith("UNIQUE constraint failed"):
        return None
    columns = message.split(":", 1)[1].strip()
    return ConflictError(CONFLICT_DETAILS.get(columns, "Record already exists"))


class Database:
    def __init__(self, path: Optional[Union[Path, str]] = None):
        if path is None:
            from projectboard.config import get_settings
            path = get_settings().DATABASE_PATH
        self.path = Path(path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA journal_mode = WAL")
            self._conn = conn
            logger.debug(f"Opened database {self.path}")
        return self._conn

    def init(self) -> None:
        """Create all tables (idempotent)."""
        with self._lock:
            conn = self._connect()
            conn.executescript(SCHEMA_DDL)
            conn.commit()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a unit of work: commit on success, roll back on any exception.

        Duplicate keys are re-raised as ``ConflictError`` so they reach the
        API as 409 instead of 500.
        """
        with self._lock:
            conn = self._connect()
            try:
                yield conn
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                conflict = conflict_from(e)
                if conflict is None:
                    raise
                logger.info(f"Rejected duplicate write: {e}")
                raise conflict from e
            except Exception:
                conn.rollback()
                raise

    def fetchone(self, sql: str, params: tuple = ()) -> Optional[dict[str, Any]]:
        with self._lock:
            row = self._connect().execute(sql, params).fetchone()
        return dict(row) if row else None

    def fetchall(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        with self._lock:
            rows = self._connect().execute(sql, params).fetchall()
        return [dict(r) for r in rows]
