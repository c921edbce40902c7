"""Tests for code generation and the uniqueness resolver."""

import random
import re

import pytest

from app.core.exceptions import (
    CodeAlreadyExists,
    CodeNotAlphanumeric,
    CodeTooShortOrLong,
    GenerationExhausted,
    ReservedCode,
)
from app.core.observability import ServiceObserver
from app.services.code_generator import BASE62_CHARS, generate_candidate
from app.services.uniqueness import UniquenessResolver

CODE_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


class FakeRegistry:
    """Registry stand-in that reports the first `collisions` checks as taken."""

    def __init__(self, collisions: int = 0, taken=()):
        self.collisions = collisions
        self.taken = set(taken)
        self.checked = []

    async def exists(self, short_code: str) -> bool:
        self.checked.append(short_code)
        if short_code in self.taken:
            return True
        return len(self.checked) <= self.collisions


class ScriptedRandom:
    """Random source that yields the given codes in order."""

    def __init__(self, *codes):
        self.codes = list(codes)

    def choices(self, population, k):
        code = self.codes.pop(0)
        assert len(code) == k
        return list(code)


class TestCodeGenerator:

    def test_alphabet(self):
        assert len(BASE62_CHARS) == 62
        assert len(set(BASE62_CHARS)) == 62

    @pytest.mark.parametrize("length", [1, 6, 8, 32])
    def test_length_and_alphabet(self, length):
        code = generate_candidate(length)
        assert len(code) == length
        assert CODE_PATTERN.match(code)

    def test_seeded_source_is_deterministic(self):
        assert generate_candidate(6, random.Random(7)) == generate_candidate(6, random.Random(7))

    def test_codes_vary(self):
        codes = {generate_candidate(6) for _ in range(200)}
        assert len(codes) > 190


class TestAllocateCode:

    @pytest.mark.asyncio
    async def test_first_free_candidate_wins(self):
        registry = FakeRegistry()
        code = await UniquenessResolver(registry).allocate_code()

        assert len(code) == 6
        assert CODE_PATTERN.match(code)
        assert registry.checked == [code]

    @pytest.mark.asyncio
    async def test_retries_after_collisions(self):
        registry = FakeRegistry(collisions=3)
        observer = ServiceObserver()
        code = await UniquenessResolver(registry, observer=observer).allocate_code()

        assert len(code) == 6
        assert len(registry.checked) == 4
        assert registry.checked[-1] == code
        assert observer.count("code_collision") == 3

    @pytest.mark.asyncio
    async def test_fallback_after_ten_collisions_is_not_rechecked(self):
        registry = FakeRegistry(collisions=1000)
        observer = ServiceObserver()
        code = await UniquenessResolver(registry, observer=observer).allocate_code()

        assert len(code) == 8
        assert CODE_PATTERN.match(code)
        assert len(registry.checked) == 10
        assert code not in registry.checked
        assert observer.count("code_fallback") == 1

    @pytest.mark.asyncio
    async def test_verified_fallback_collision_is_exhaustion(self):
        registry = FakeRegistry(collisions=1000)
        resolver = UniquenessResolver(registry, verify_fallback=True)

        with pytest.raises(GenerationExhausted):
            await resolver.allocate_code()
        assert len(registry.checked) == 11

    @pytest.mark.asyncio
    async def test_reserved_candidate_is_skipped(self):
        registry = FakeRegistry()
        observer = ServiceObserver()
        resolver = UniquenessResolver(
            registry, observer=observer, rng=ScriptedRandom("health", "aB3xY9")
        )

        assert await resolver.allocate_code() == "aB3xY9"
        assert registry.checked == ["aB3xY9"]
        assert observer.count("code_collision") == 1

    @pytest.mark.asyncio
    async def test_verified_fallback_free(self):
        registry = FakeRegistry(collisions=10)
        code = await UniquenessResolver(registry, verify_fallback=True).allocate_code()

        assert len(code) == 8
        assert len(registry.checked) == 11


class TestCustomCode:

    @pytest.mark.asyncio
    async def test_free_code_is_accepted_verbatim(self):
        registry = FakeRegistry()
        resolver = UniquenessResolver(registry)
        assert await resolver.validate_and_check_custom("MyCode1") == "MyCode1"
        assert registry.checked == ["MyCode1"]

    @pytest.mark.asyncio
    async def test_whitespace_is_trimmed(self):
        resolver = UniquenessResolver(FakeRegistry())
        assert await resolver.validate_and_check_custom("  abc  ") == "abc"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code, error", [
        ("ab", CodeTooShortOrLong),
        ("abcdefghijk", CodeTooShortOrLong),
        ("my-code", CodeNotAlphanumeric),
        ("a!", CodeTooShortOrLong),
    ])
    async def test_bad_shape_never_touches_store(self, code, error):
        registry = FakeRegistry()
        with pytest.raises(error):
            await UniquenessResolver(registry).validate_and_check_custom(code)
        assert registry.checked == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["health", "metrics", "docs", "redoc"])
    async def test_reserved_code_never_touches_store(self, code):
        registry = FakeRegistry()
        with pytest.raises(ReservedCode):
            await UniquenessResolver(registry).validate_and_check_custom(code)
        assert registry.checked == []

    @pytest.mark.asyncio
    async def test_reserved_names_are_case_sensitive(self):
        resolver = UniquenessResolver(FakeRegistry())
        assert await resolver.validate_and_check_custom("Health") == "Health"

    @pytest.mark.asyncio
    async def test_blank_code_is_too_short(self):
        registry = FakeRegistry()
        with pytest.raises(CodeTooShortOrLong):
            await UniquenessResolver(registry).validate_and_check_custom("   ")
        assert registry.checked == []

    @pytest.mark.asyncio
    async def test_taken_code(self):
        registry = FakeRegistry(taken={"dup1"})
        with pytest.raises(CodeAlreadyExists):
            await UniquenessResolver(registry).validate_and_check_custom("dup1")

    @pytest.mark.asyncio
    async def test_codes_are_case_sensitive(self):
        registry = FakeRegistry(taken={"dup1"})
        assert await UniquenessResolver(registry).validate_and_check_custom("DUP1") == "DUP1"
