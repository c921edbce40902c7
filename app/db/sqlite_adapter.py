"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration is encapsulated here.

SQLite is a file-based database that's perfect for:
- Local development
- Testing
- Single-instance deployments

Key characteristics:
- File-based (single .db file)
- Single writer at a time (file locking); concurrent writers wait on the
  busy timeout instead of failing immediately
- Unique index violations raise IntegrityError like any other backend
"""

from typing import Any

from sqlalchemy.pool import NullPool

from app.core.setting import settings
from app.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """SQLite database adapter implementation."""

    BUSY_TIMEOUT_SECONDS = 30

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool: every session opens its own connection to the
        file, so concurrent sessions see each other's committed rows.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            "timeout": self.BUSY_TIMEOUT_SECONDS,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def get_dialect_name(self) -> str:
        return "sqlite"


def get_database_adapter(database_url: str = None) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Returns PostgreSQLAdapter for postgresql:// URLs and SQLiteAdapter
    for everything else.

    Returns:
        DatabaseAdapter instance
    """
    database_url = database_url or settings.DATABASE_URL
    if database_url.startswith("postgresql"):
        from app.db.postgres_adapter import PostgreSQLAdapter
        return PostgreSQLAdapter()
    return SQLiteAdapter()
