"""
Input Validators and Sanitizers

This module provides validation and normalization functions for user inputs.
Validation here never touches the database, so bad input is rejected
before any store access.

Security Considerations:
- Only http:// and https:// URLs are accepted (no javascript:, file:, ...)
- Short codes are restricted to [A-Za-z0-9]
- Length limits prevent oversized rows and abuse
"""

import re
from typing import Optional

from app.core.exceptions import (
    CodeNotAlphanumeric,
    CodeTooShortOrLong,
    InvalidURLError,
)
from app.core.setting import settings

ALLOWED_URL_PREFIXES = ("http://", "https://")

_ALPHANUMERIC = re.compile(r'^[0-9a-zA-Z]+$')

# Paths served by fixed routes ahead of the redirect route
RESERVED_CODES = frozenset({"health", "metrics", "docs", "redoc"})


def normalize_url(url: Optional[str], max_length: int = None) -> str:
    """
    Trim and validate an original URL.

    Args:
        url: The URL as supplied by the caller
        max_length: Maximum allowed length (default: settings.MAX_URL_LENGTH)

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        InvalidURLError: If the URL is empty or does not use http/https
    """
    max_length = max_length or settings.MAX_URL_LENGTH

    if url is None or not isinstance(url, str) or not url.strip():
        raise InvalidURLError(url or "", reason="URL must not be empty")

    url = url.strip()

    if not url.startswith(ALLOWED_URL_PREFIXES):
        raise InvalidURLError(
            url,
            reason="Invalid URL scheme. URL must start with http:// or https://"
        )

    if len(url) > max_length:
        raise InvalidURLError(
            url[:50] + "...",
            reason=f"URL is longer than {max_length} characters"
        )

    return url


def normalize_custom_code(short_code: Optional[str]) -> Optional[str]:
    """Strip whitespace from a custom code. Only None means "not supplied"."""
    if short_code is None:
        return None
    return short_code.strip()


def check_custom_code_shape(
    short_code: str,
    min_length: int = None,
    max_length: int = None,
) -> str:
    """
    Validate custom code length and alphabet.

    Length is checked first, then the alphabet.

    Raises:
        CodeTooShortOrLong: If the code is outside [min_length, max_length]
        CodeNotAlphanumeric: If the code contains non [A-Za-z0-9] characters
    """
    min_length = min_length or settings.CUSTOM_CODE_MIN_LENGTH
    max_length = max_length or settings.CUSTOM_CODE_MAX_LENGTH

    if not min_length <= len(short_code) <= max_length:
        raise CodeTooShortOrLong(short_code, min_length, max_length)

    if not _ALPHANUMERIC.match(short_code):
        raise CodeNotAlphanumeric(short_code)

    return short_code


def is_possible_short_code(short_code: str) -> bool:
    """
    Cheap check used on the redirect path.

    Returns False for anything that can never be stored as a short code,
    so unknown garbage paths skip the database lookup entirely.
    """
    if not short_code or len(short_code) > max(
        settings.CUSTOM_CODE_MAX_LENGTH, settings.FALLBACK_CODE_LENGTH
    ):
        return False
    return bool(_ALPHANUMERIC.match(short_code))
