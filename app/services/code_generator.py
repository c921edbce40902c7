"""
Short Code Generator

Produces random candidate short codes from the base62 alphabet [A-Za-z0-9].

Design Decisions:
- Uniform choice per character: collision probability matters, predictability
  does not, so the plain `random` module is used
- No database access: uniqueness is decided by the Uniqueness Resolver and,
  finally, by the unique index on links.short_code
"""

import random
import string

BASE62_CHARS = string.ascii_letters + string.digits
BASE62_LENGTH = len(BASE62_CHARS)


def generate_candidate(length: int, rng: random.Random = None) -> str:
    """
    Generate a random base62 string of exactly `length` characters.

    Args:
        length: Number of characters to generate
        rng: Random source (default: the module-level `random` generator)

    Example:
        generate_candidate(6) -> "aZ3k9Q"
    """
    rng = rng or random
    return "".join(rng.choices(BASE62_CHARS, k=length))
