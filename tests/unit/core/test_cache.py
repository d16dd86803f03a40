"""
Unit tests for the cache gateway.

Tests key layout, value encoding and failure absorption.
"""

import base64
import os
from unittest.mock import AsyncMock, patch

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")


class TestCacheKeys:
    """Tests for cache key naming."""

    @pytest.mark.unit
    def test_key_layout(self):
        from app.core.cache import CacheKeys

        assert CacheKeys.books_list() == "books:list:all"
        assert CacheKeys.book_detail("abc") == "books:detail:abc"
        assert CacheKeys.pdf_file("abc") == "books:pdf:abc"
        assert CacheKeys.cover_image("abc") == "books:cover:abc"


class TestCacheGateway:
    """Tests for CacheGateway reads and writes."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_json_roundtrip_with_ttl(self, cache, cache_backend):
        assert await cache.set_json("k", [{"title": "Algebra"}], ttl=60) is True

        assert await cache.get_json("k") == [{"title": "Algebra"}]
        assert cache_backend.ttls["k"] == 60

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bytes_are_stored_as_base64_text(self, cache, cache_backend):
        await cache.set_bytes("pdf", b"%PDF-1.4 binary \x00\xff")

        assert base64.b64decode(cache_backend.store["pdf"]) == b"%PDF-1.4 binary \x00\xff"
        assert await cache.get_bytes("pdf") == b"%PDF-1.4 binary \x00\xff"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_str_values_are_accepted(self, cache, cache_backend):
        """Test that decoded string values (Redis decode_responses) are read."""
        cache_backend.store["k"] = '{"a": 1}'

        assert await cache.get_json("k") == {"a": 1}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_miss_returns_none(self, cache):
        assert await cache.get_json("missing") is None
        assert await cache.get_bytes("missing") is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_corrupt_entries_read_as_miss(self, cache, cache_backend):
        cache_backend.store["json"] = b"{not json"
        cache_backend.store["bytes"] = b"***"

        assert await cache.get_json("json") is None
        assert await cache.get_bytes("bytes") is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_absent_key_is_noop(self, cache):
        assert await cache.delete("never-set") is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_many(self, cache, cache_backend):
        await cache.set_json("a", 1)
        await cache.set_json("b", 2)

        assert await cache.delete_many(["a", "b", "c"]) is True
        assert cache_backend.store == {}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_inmemory_backend_keyerror_is_absorbed(self):
        """Test that a backend raising KeyError on unknown keys counts as deleted."""
        from app.core.cache import CacheGateway

        backend = AsyncMock()
        backend.clear = AsyncMock(side_effect=KeyError("k"))
        gateway = CacheGateway(backend, "memory")

        assert await gateway.delete("k") is True


class TestCacheFailures:
    """Tests that backend failures never reach callers."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failing_backend_degrades_to_miss(self, failing_cache):
        gateway = failing_cache

        assert await gateway.get_json("k") is None
        assert await gateway.get_bytes("k") is None
        assert await gateway.set_json("k", {"a": 1}) is False
        assert await gateway.set_bytes("k", b"x") is False
        assert await gateway.delete("k") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_disabled_gateway_always_misses(self):
        from app.core.cache import CacheGateway

        gateway = CacheGateway(None)

        assert gateway.enabled is False
        assert gateway.backend_name == "disabled"
        assert await gateway.set_json("k", 1) is False
        assert await gateway.get_json("k") is None


class TestInitCache:
    """Tests for backend selection at startup."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_disabled(self, test_settings):
        from app.core.cache import init_cache

        gateway = await init_cache(test_settings.model_copy(update={"CACHE_ENABLED": False}))

        assert gateway.enabled is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_memory_backend(self, test_settings):
        from fastapi_cache.backends.inmemory import InMemoryBackend
        from app.core.cache import init_cache

        gateway = await init_cache(test_settings)

        assert gateway.backend_name == "memory"
        assert isinstance(gateway._backend, InMemoryBackend)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_redis_without_url_falls_back_to_memory(self, test_settings):
        from app.core.cache import init_cache

        gateway = await init_cache(
            test_settings.model_copy(
                update={"CACHE_BACKEND": "redis", "REDIS_URL": None, "REDIS_HOST": None}
            )
        )

        assert gateway.backend_name == "memory"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unreachable_redis_falls_back_to_memory(self, test_settings):
        from app.core.cache import init_cache

        redis_client = AsyncMock()
        redis_client.ping = AsyncMock(side_effect=ConnectionError("refused"))
        redis_client.aclose = AsyncMock()

        with patch("app.core.cache.aioredis.from_url", return_value=redis_client):
            gateway = await init_cache(
                test_settings.model_copy(
                    update={"CACHE_BACKEND": "redis", "REDIS_URL": "redis://nowhere:6379/0"}
                )
            )

        assert gateway.backend_name == "memory"
        redis_client.aclose.assert_awaited_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reachable_redis(self, test_settings):
        from app.core.cache import init_cache

        redis_client = AsyncMock()
        redis_client.ping = AsyncMock(return_value=True)
        redis_client.aclose = AsyncMock()

        with patch("app.core.cache.aioredis.from_url", return_value=redis_client):
            gateway = await init_cache(
                test_settings.model_copy(
                    update={"CACHE_BACKEND": "redis", "REDIS_URL": "redis://cache:6379/0"}
                )
            )

        assert gateway.backend_name == "redis"
        await gateway.close()
        redis_client.aclose.assert_awaited_once()
