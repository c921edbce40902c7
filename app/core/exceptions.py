"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Every exception carries the HTTP status code it is reported with, so the
API layer can render any of them without knowing the full taxonomy:
- Validation errors (400): bad URL, bad custom code shape
- Conflict errors (409): code taken before or during insert
- Not found (404): unknown short code
- Internal errors (500): store failures, exhausted code generation
"""


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    status_code = 500


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""
    status_code = 400

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url!r}")


class CodeTooShortOrLong(URLShortenerException):
    """Raised when a custom code is outside the allowed length range."""
    status_code = 400

    def __init__(self, short_code: str, min_length: int, max_length: int):
        self.short_code = short_code
        self.min_length = min_length
        self.max_length = max_length
        super().__init__(
            f"Custom code must be between {min_length} and {max_length} characters long, "
            f"got {len(short_code)}"
        )


class CodeNotAlphanumeric(URLShortenerException):
    """Raised when a custom code contains characters outside [A-Za-z0-9]."""
    status_code = 400

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(
            f"Custom code '{short_code}' must contain only letters and digits"
        )


class CodeAlreadyExists(URLShortenerException):
    """Raised when a requested custom code is already taken."""
    status_code = 409

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Custom code '{short_code}' is already in use")


class ReservedCode(URLShortenerException):
    """Raised when a custom code is the name of a fixed route (e.g. "health")."""
    status_code = 409

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Custom code '{short_code}' is reserved, please choose another")


class DuplicateCode(URLShortenerException):
    """Raised by the registry when the store's unique constraint rejects an insert."""
    status_code = 409

    def __init__(self, short_code: str, original_error: Exception = None):
        self.short_code = short_code
        self.original_error = original_error
        super().__init__(f"Short code '{short_code}' already exists")


class CodeConflict(URLShortenerException):
    """Raised when a code was taken between the availability check and the insert."""
    status_code = 409

    def __init__(self, short_code: str, generated: bool = False):
        self.short_code = short_code
        self.generated = generated
        if generated:
            message = f"Generated short code '{short_code}' was claimed by another request, please retry"
        else:
            message = f"Custom code '{short_code}' was claimed by another request, please choose another"
        super().__init__(message)


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""
    status_code = 404

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class GenerationExhausted(URLShortenerException):
    """Raised when no unique short code could be produced."""
    status_code = 500

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not generate a unique short code after {attempts} attempts"
        )


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""
    status_code = 500

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
