"""
Shared pytest fixtures.

Every test gets its own file-backed SQLite database under tmp_path, so
concurrent sessions (requests, background increments) see each other's
committed rows exactly as they would against a real server.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.api.dependencies import get_click_tracker, get_observer
from app.core.observability import ServiceObserver
from app.db.session import get_session, init_models, make_session_maker
from app.db.sqlite_adapter import SQLiteAdapter
from app.main import app
from app.services.click_tracker import ClickTracker
from app.services.link_registry import LinkRegistry


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    test_engine = SQLiteAdapter().create_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'links.db'}"
    )
    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker:
    return make_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as test_session:
        yield test_session


@pytest.fixture
def registry(session: AsyncSession) -> LinkRegistry:
    return LinkRegistry(session)


@pytest.fixture
def observer() -> ServiceObserver:
    return ServiceObserver()


@pytest_asyncio.fixture
async def click_tracker(
    session_maker: async_sessionmaker, observer: ServiceObserver
) -> AsyncGenerator[ClickTracker, None]:
    tracker = ClickTracker(session_maker, observer=observer)
    yield tracker
    await tracker.drain()


@pytest_asyncio.fixture
async def client(
    session_maker: async_sessionmaker,
    observer: ServiceObserver,
    click_tracker: ClickTracker,
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as request_session:
            yield request_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_observer] = lambda: observer
    app.dependency_overrides[get_click_tracker] = lambda: click_tracker
    app_observer = app.state.observer
    app.state.observer = observer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.observer = app_observer
