"""Unit tests for the media cache service."""

import base64

import pytest
from mocks.mock_backends import InMemoryStorage

from bot_lanes.services.media_cache import MediaCache


class TestMediaCache:
    """Tests for MediaCache."""

    @pytest.mark.asyncio
    async def test_ingest_is_idempotent(
        self, media_cache: MediaCache, storage: InMemoryStorage
    ) -> None:
        encoded = base64.b64encode(b"gif").decode()

        assert await media_cache.ingest("h1", "t.me/1/2", encoded) is True
        assert await media_cache.ingest("h1", "t.me/1/2", encoded) is False
        assert await media_cache.count() == 1

    @pytest.mark.asyncio
    async def test_same_hash_different_origin_is_new_row(self, media_cache: MediaCache) -> None:
        assert await media_cache.ingest("h1", "t.me/1/2", "Z2lm")
        assert await media_cache.ingest("h1", "t.me/1/3", "Z2lm")
        assert await media_cache.count() == 2

    @pytest.mark.asyncio
    async def test_contains(self, media_cache: MediaCache) -> None:
        assert not await media_cache.contains("h1")
        await media_cache.ingest("h1", "t.me/1/2", "Z2lm")
        assert await media_cache.contains("h1")

    @pytest.mark.asyncio
    async def test_sample_random_empty(self, media_cache: MediaCache) -> None:
        assert await media_cache.sample_random() is None

    @pytest.mark.asyncio
    async def test_sample_random_returns_stored_item(self, media_cache: MediaCache) -> None:
        await media_cache.ingest("h1", "t.me/1/2", base64.b64encode(b"gif").decode())

        item = await media_cache.sample_random()

        assert item is not None
        assert item.content_hash == "h1"
        assert item.decode() == b"gif"

    @pytest.mark.asyncio
    async def test_storage_failures_are_neutral(self, storage: InMemoryStorage) -> None:
        storage.fail_media = True
        cache = MediaCache(storage)

        assert await cache.ingest("h1", "t.me/1/2", "Z2lm") is False
        assert await cache.contains("h1") is False
        assert await cache.sample_random() is None
