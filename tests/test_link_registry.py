"""Tests for the link registry against a real SQLite database."""

import pytest

from app.core.exceptions import DuplicateCode, ShortCodeNotFoundError
from app.services.link_registry import LinkRegistry


class TestCreateAndLookup:

    @pytest.mark.asyncio
    async def test_create_returns_id(self, registry: LinkRegistry):
        first = await registry.create("abc123", "https://example.com")
        second = await registry.create("xyz789", "https://example.org")

        assert isinstance(first, int)
        assert second != first

        link = await registry.find_by_code("abc123")
        assert link.id == first
        assert link.original_url == "https://example.com"
        assert link.click_count == 0
        assert link.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_code_is_rejected(self, registry: LinkRegistry):
        await registry.create("dup1", "https://a.com")

        with pytest.raises(DuplicateCode) as exc_info:
            await registry.create("dup1", "https://b.com")
        assert exc_info.value.short_code == "dup1"

        # The session is usable again and the first row is untouched
        link = await registry.find_by_code("dup1")
        assert link.original_url == "https://a.com"
        assert (await registry.stats()).total_links == 1

    @pytest.mark.asyncio
    async def test_codes_are_case_sensitive(self, registry: LinkRegistry):
        await registry.create("AbC", "https://upper.com")
        await registry.create("abc", "https://lower.com")

        assert (await registry.find_by_code("AbC")).original_url == "https://upper.com"
        assert (await registry.find_by_code("abc")).original_url == "https://lower.com"

    @pytest.mark.asyncio
    async def test_missing_code(self, registry: LinkRegistry):
        assert await registry.get_by_code("nope") is None
        with pytest.raises(ShortCodeNotFoundError):
            await registry.find_by_code("nope")

    @pytest.mark.asyncio
    async def test_exists(self, registry: LinkRegistry):
        assert await registry.exists("here") is False
        await registry.create("here", "https://example.com")
        assert await registry.exists("here") is True


class TestListing:

    @pytest.mark.asyncio
    async def test_newest_first(self, registry: LinkRegistry):
        for code in ("first", "second", "third"):
            await registry.create(code, f"https://{code}.com")

        links = await registry.list_all()
        assert [link.short_code for link in links] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_empty(self, registry: LinkRegistry):
        assert await registry.list_all() == []


class TestCounters:

    @pytest.mark.asyncio
    async def test_increment(self, registry: LinkRegistry):
        await registry.create("count", "https://example.com")
        for _ in range(3):
            await registry.increment_clicks("count")

        assert (await registry.find_by_code("count")).click_count == 3

    @pytest.mark.asyncio
    async def test_increment_missing_code_is_noop(self, registry: LinkRegistry):
        await registry.increment_clicks("ghost")
        assert (await registry.stats()).total_links == 0

    @pytest.mark.asyncio
    async def test_increment_from_another_session_is_visible(self, registry, session_maker):
        await registry.create("shared", "https://example.com")
        assert (await registry.find_by_code("shared")).click_count == 0

        async with session_maker() as other:
            await LinkRegistry(other).increment_clicks("shared")

        assert (await registry.find_by_code("shared")).click_count == 1


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_reports_rows_removed(self, registry: LinkRegistry):
        await registry.create("gone", "https://example.com")

        assert await registry.delete("gone") == 1
        assert await registry.delete("gone") == 0
        assert await registry.exists("gone") is False

    @pytest.mark.asyncio
    async def test_code_can_be_reused_after_delete(self, registry: LinkRegistry):
        await registry.create("again", "https://one.com")
        await registry.delete("again")
        await registry.create("again", "https://two.com")

        assert (await registry.find_by_code("again")).original_url == "https://two.com"


class TestStats:

    @pytest.mark.asyncio
    async def test_empty_store(self, registry: LinkRegistry):
        stats = await registry.stats()
        assert stats.total_links == 0
        assert stats.total_clicks == 0

    @pytest.mark.asyncio
    async def test_totals(self, registry: LinkRegistry):
        await registry.create("one", "https://one.com")
        await registry.create("two", "https://two.com")
        await registry.increment_clicks("one")
        await registry.increment_clicks("one")
        await registry.increment_clicks("two")

        stats = await registry.stats()
        assert stats.total_links == 2
        assert stats.total_clicks == 3
