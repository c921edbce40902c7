"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: SQLite by default, PostgreSQL via DATABASE_URL
- Connection pooling: Configured per database type
- Async session management: Proper async context management
- Error handling: Automatic rollback on exceptions
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.core.setting import settings
from app.db.sqlite_adapter import get_database_adapter

db_adapter = get_database_adapter(settings.DATABASE_URL)

# The engine is lazy: no connection is opened until the first query
engine = db_adapter.create_engine(settings.DATABASE_URL)


def make_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """Session factory used by requests and by background increments alike."""
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
        autoflush=False,
    )


async_session_maker = make_session_maker(engine)


async def init_models(bind: AsyncEngine = None) -> None:
    """Create missing tables (local development and tests; production uses Alembic)."""
    # Registers the tables on SQLModel.metadata
    from app.db import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session from the pool
    - Yields it to the endpoint
    - Rolls back on exception
    - Closes session automatically (context manager handles it)

    Registry operations commit their own transactions, so nothing is
    committed here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
