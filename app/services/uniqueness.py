"""
Uniqueness Resolver

Decides which short code a new link gets.

Generated codes:
- Up to MAX_GENERATION_ATTEMPTS random candidates of SHORT_CODE_LENGTH are
  checked against the store; the first free one wins
- If every attempt collides, one candidate of FALLBACK_CODE_LENGTH is used
  without checking it (62^8 candidates make a collision negligible and the
  latency stays bounded). The unique index still rejects a real collision
  at insert time. Set VERIFY_FALLBACK_CODE to check the fallback once.

Custom codes:
- Normalized, then shape-checked (length, then alphabet) and checked
  against the reserved route names before any store access, then checked
  for availability

Reserved route names are skipped as generated candidates too.
"""

import random
from typing import Optional

from app.core.exceptions import CodeAlreadyExists, GenerationExhausted, ReservedCode
from app.core.observability import ServiceObserver
from app.core.setting import settings
from app.core.validators import RESERVED_CODES, check_custom_code_shape, normalize_custom_code
from app.services.code_generator import generate_candidate
from app.services.link_registry import LinkRegistry


class UniquenessResolver:
    """Allocates random codes and vets custom codes against the registry."""

    def __init__(
        self,
        registry: LinkRegistry,
        observer: Optional[ServiceObserver] = None,
        code_length: int = None,
        fallback_length: int = None,
        max_attempts: int = None,
        verify_fallback: bool = None,
        rng: random.Random = None,
    ):
        self.registry = registry
        self.observer = observer or ServiceObserver()
        self.code_length = code_length or settings.SHORT_CODE_LENGTH
        self.fallback_length = fallback_length or settings.FALLBACK_CODE_LENGTH
        self.max_attempts = max_attempts or settings.MAX_GENERATION_ATTEMPTS
        self.verify_fallback = (
            settings.VERIFY_FALLBACK_CODE if verify_fallback is None else verify_fallback
        )
        self.rng = rng

    async def allocate_code(self) -> str:
        """
        Return a random code that was free when checked.

        Raises:
            GenerationExhausted: Only when verify_fallback is on and the
                fallback code collides as well
            DatabaseError: If an availability check fails
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = generate_candidate(self.code_length, self.rng)
            if candidate not in RESERVED_CODES and not await self.registry.exists(candidate):
                self.observer.event("code_allocated", attempt=attempt, length=self.code_length)
                return candidate
            self.observer.event("code_collision", attempt=attempt, code=candidate)

        candidate = generate_candidate(self.fallback_length, self.rng)
        self.observer.notice(
            "code_fallback",
            attempts=self.max_attempts,
            length=self.fallback_length,
        )

        if self.verify_fallback and await self.registry.exists(candidate):
            self.observer.notice("code_fallback_collision", code=candidate)
            raise GenerationExhausted(self.max_attempts + 1)

        return candidate

    async def validate_and_check_custom(self, short_code: str) -> str:
        """
        Validate a user-supplied code and make sure it is free.

        Returns:
            The normalized code

        Raises:
            CodeTooShortOrLong: Length outside the allowed range
            CodeNotAlphanumeric: Characters outside [A-Za-z0-9]
            ReservedCode: The code names a fixed route such as "health"
            CodeAlreadyExists: The code is already taken
        """
        short_code = normalize_custom_code(short_code) or ""
        check_custom_code_shape(short_code)

        if short_code in RESERVED_CODES:
            raise ReservedCode(short_code)

        if await self.registry.exists(short_code):
            self.observer.event("custom_code_taken", code=short_code)
            raise CodeAlreadyExists(short_code)

        return short_code
