"""Database layer: SQLite with ACID transactions and repository pattern."""

from projectboard.db.database import Database
from projectboard.db.schema import SCHEMA_DDL

__all__ = ["Database", "SCHEMA_DDL"]
