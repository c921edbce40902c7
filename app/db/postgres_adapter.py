"""
PostgreSQL Database Adapter

Production backend. Uses asyncpg through SQLAlchemy's async engine with a
bounded connection pool shared by all requests and background increments.
"""

from typing import Any, Optional

from sqlalchemy.pool import Pool

from app.core.setting import settings
from app.db.interface import DatabaseAdapter


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def __init__(self, pool_size: int = None):
        self.pool_size = pool_size or settings.DB_POOL_SIZE

    def get_pool_class(self) -> Optional[type[Pool]]:
        # Default async queue pool
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": self.pool_size,
            "max_overflow": 0,
            "pool_pre_ping": True,
        }

    def get_dialect_name(self) -> str:
        return "postgresql"
