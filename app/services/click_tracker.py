"""
Click Tracker

Fire-and-forget click counting for the redirect path.

The redirect response never waits on a write. schedule() spawns an asyncio
task that opens its own database session (the request session is closed by
the time the increment runs), increments the counter, and logs any failure
instead of raising it.

Semantics:
- At most once: an increment lost to a crash or shutdown is not retried
- Increments for the same code are commutative, so ordering does not matter
- drain() waits for in-flight increments (shutdown, tests)
"""

import asyncio
import logging
from typing import Optional, Set

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.observability import ServiceObserver
from app.services.link_registry import LinkRegistry

logger = logging.getLogger(__name__)


class ClickTracker:
    """Schedules detached click-count increments."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        observer: Optional[ServiceObserver] = None,
    ):
        self.session_factory = session_factory
        self.observer = observer or ServiceObserver()
        # The event loop only keeps weak references to tasks
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, short_code: str) -> asyncio.Task:
        """Start an increment for `short_code` and return without awaiting it."""
        task = asyncio.get_running_loop().create_task(
            self._increment(short_code),
            name=f"increment-clicks-{short_code}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled increment has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _increment(self, short_code: str) -> None:
        try:
            async with self.session_factory() as session:
                registry = LinkRegistry(session)
                await registry.increment_clicks(short_code)
            self.observer.event("click_recorded", code=short_code)
        except asyncio.CancelledError:
            self.observer.notice("click_increment_cancelled", code=short_code)
            raise
        except Exception as e:
            self.observer.failure("click_increment_failed", e, code=short_code)
