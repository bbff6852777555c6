"""Tests for the per-document settings cache."""

import asyncio

import pytest

from dana.lsp.diagnostics import ValidationSettings
from dana.lsp.settings import DocumentSettingsCache

URI = "file:///program.dana"


class CountingFetcher:
    """Settings fetcher that records the URIs it was asked for."""

    def __init__(self, max_problems: int = 7) -> None:
        self.calls: list[str] = []
        self.max_problems = max_problems

    async def __call__(self, uri: str) -> ValidationSettings:
        self.calls.append(uri)
        return ValidationSettings(max_number_of_problems=self.max_problems)


class TestDocumentSettingsCache:
    """Test suite for DocumentSettingsCache."""

    def test_fetches_once_per_document(self) -> None:
        cache = DocumentSettingsCache()
        fetch = CountingFetcher()

        first = asyncio.run(cache.get_or_fetch(URI, fetch))
        second = asyncio.run(cache.get_or_fetch(URI, fetch))

        assert first.max_number_of_problems == 7
        assert second is first
        assert fetch.calls == [URI]

    def test_documents_cached_separately(self) -> None:
        cache = DocumentSettingsCache()
        fetch = CountingFetcher()

        asyncio.run(cache.get_or_fetch(URI, fetch))
        asyncio.run(cache.get_or_fetch("file:///other.dana", fetch))

        assert len(cache) == 2
        assert fetch.calls == [URI, "file:///other.dana"]

    def test_invalidate_single_entry(self) -> None:
        cache = DocumentSettingsCache()
        cache.set(URI, ValidationSettings())
        cache.set("file:///other.dana", ValidationSettings())

        cache.invalidate(URI)

        assert URI not in cache
        assert "file:///other.dana" in cache

    def test_invalidate_missing_entry(self) -> None:
        cache = DocumentSettingsCache()

        cache.invalidate(URI)

        assert len(cache) == 0

    def test_clear(self) -> None:
        cache = DocumentSettingsCache()
        fetch = CountingFetcher()
        asyncio.run(cache.get_or_fetch(URI, fetch))

        cache.clear()
        asyncio.run(cache.get_or_fetch(URI, fetch))

        assert fetch.calls == [URI, URI]

    def test_failed_fetch_not_cached(self) -> None:
        cache = DocumentSettingsCache()

        async def failing(uri: str) -> ValidationSettings:
            raise ConnectionError("client went away")

        with pytest.raises(ConnectionError):
            asyncio.run(cache.get_or_fetch(URI, failing))

        assert cache.get(URI) is None
