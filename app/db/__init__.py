"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: backend-specific engine configuration
- Session management: Database session creation and management
"""

from app.db.interface import DatabaseAdapter
from app.db.session import async_session_maker, engine, get_session, init_models

__all__ = [
    "DatabaseAdapter",
    "get_session",
    "async_session_maker",
    "engine",
    "init_models",
]
