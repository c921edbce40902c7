"""
Redirect Service

This service handles URL redirection logic on the hot path.

Design Decisions:
- Lookup first; an unknown code has no side effects at all
- A known code schedules its click increment on the ClickTracker and returns
  immediately, so the redirect latency never includes a write
- Codes that can never exist (wrong alphabet, too long) skip the database
"""

from typing import Optional

from app.core.exceptions import ShortCodeNotFoundError
from app.core.observability import ServiceObserver
from app.core.validators import is_possible_short_code
from app.services.click_tracker import ClickTracker
from app.services.link_registry import LinkRegistry


class RedirectService:
    """Resolves short codes to original URLs and counts the click."""

    def __init__(
        self,
        registry: LinkRegistry,
        click_tracker: ClickTracker,
        observer: Optional[ServiceObserver] = None,
    ):
        self.registry = registry
        self.click_tracker = click_tracker
        self.observer = observer or ServiceObserver()

    async def resolve(self, short_code: str) -> str:
        """
        Get the original URL for redirection.

        Raises:
            ShortCodeNotFoundError: If the code is unknown
            DatabaseError: If the lookup fails
        """
        if not is_possible_short_code(short_code):
            self.observer.event("redirect_not_found", code=short_code)
            raise ShortCodeNotFoundError(short_code)

        try:
            link = await self.registry.find_by_code(short_code)
        except ShortCodeNotFoundError:
            self.observer.event("redirect_not_found", code=short_code)
            raise

        self.click_tracker.schedule(short_code)
        self.observer.event("redirect_resolved", code=short_code)
        return link.original_url
