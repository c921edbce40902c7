"""
URL Shortening Service

This service handles the creation of short links:
- Validating the original URL
- Choosing the code (custom code or a generated one)
- Persisting the link and building the public short URL

Design Decisions:
- Validation rejects bad input before any database access
- Custom code availability is checked optimistically; the unique index on
  short_code is the real serialization point between concurrent requests
- A custom code lost to a concurrent insert is a CodeConflict; the user
  must pick another code, it is never retried silently
- A generated code rejected at insert time is a CodeConflict as well; the
  bounded retry policy already ran, so the caller is told to retry
- No partial success: either the row exists and a result is returned, or
  nothing was written and an exception is raised
"""

from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import CodeConflict, DuplicateCode
from app.core.observability import ServiceObserver
from app.core.setting import settings
from app.core.validators import normalize_custom_code, normalize_url
from app.services.link_registry import LinkRegistry
from app.services.uniqueness import UniquenessResolver


@dataclass(frozen=True)
class ShortenResult:
    short_code: str
    short_url: str
    original_url: str


def build_short_url(base_url: str, short_code: str) -> str:
    return f"{base_url.rstrip('/')}/{short_code}"


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Separated from API layer for testability and maintainability.
    """

    def __init__(
        self,
        registry: LinkRegistry,
        resolver: Optional[UniquenessResolver] = None,
        observer: Optional[ServiceObserver] = None,
        base_url: str = None,
    ):
        self.registry = registry
        self.observer = observer or ServiceObserver()
        self.resolver = resolver or UniquenessResolver(registry, observer=self.observer)
        self.base_url = base_url or settings.BASE_URL

    async def shorten(self, original_url: str, custom_code: Optional[str] = None) -> ShortenResult:
        """
        Create a new short link.

        Args:
            original_url: The long URL to shorten
            custom_code: Optional code requested by the caller

        Returns:
            ShortenResult with short_code, short_url and original_url

        Raises:
            InvalidURLError: If the URL is empty or not http(s)
            CodeTooShortOrLong, CodeNotAlphanumeric: Bad custom code shape
            ReservedCode: Custom code names a fixed route
            CodeAlreadyExists: Custom code already taken
            CodeConflict: Code taken by a concurrent request
            GenerationExhausted: Verified fallback code collided
            DatabaseError: If a database operation fails
        """
        original_url = normalize_url(original_url)
        custom_code = normalize_custom_code(custom_code)

        if custom_code is not None:
            short_code = await self.resolver.validate_and_check_custom(custom_code)
        else:
            short_code = await self.resolver.allocate_code()

        try:
            link_id = await self.registry.create(short_code, original_url)
        except DuplicateCode:
            if custom_code is not None:
                self.observer.notice("custom_code_conflict", code=short_code)
                raise CodeConflict(short_code)
            self.observer.notice("generated_code_conflict", code=short_code)
            raise CodeConflict(short_code, generated=True)

        self.observer.event("link_created", id=link_id, code=short_code)
        return ShortenResult(
            short_code=short_code,
            short_url=build_short_url(self.base_url, short_code),
            original_url=original_url,
        )
