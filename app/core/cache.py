"""
Cache gateway over fastapi-cache2 backends.

Supports two backends controlled by CACHE_BACKEND env var:
- "memory" (default): In-memory cache, no external dependencies
- "redis": Redis for caching shared between processes

Every gateway call absorbs backend failures: reads degrade to a miss and
writes/deletes report ``False``. Callers never see a cache exception.

Usage:
    cache = await init_cache(settings)

    books = await cache.get_json(CacheKeys.books_list())
    if books is None:
        books = ...
        await cache.set_json(CacheKeys.books_list(), books, ttl=...)
"""

import base64
import json
from typing import Any, Iterable, Optional

from fastapi_cache.backends import Backend
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
from redis import asyncio as aioredis

from app.core.config import Settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class CacheKeys:
    """Namespaced cache keys for catalog entries."""

    LIST = "books:list:all"

    @staticmethod
    def books_list() -> str:
        return CacheKeys.LIST

    @staticmethod
    def book_detail(document_id: str) -> str:
        return f"books:detail:{document_id}"

    @staticmethod
    def pdf_file(document_id: str) -> str:
        return f"books:pdf:{document_id}"

    @staticmethod
    def cover_image(document_id: str) -> str:
        return f"books:cover:{document_id}"


class CacheGateway:
    """Key-value cache with graceful degradation.

    A gateway without a backend (caching disabled) always misses.
    """

    def __init__(
        self,
        backend: Optional[Backend],
        backend_name: str = "memory",
        redis_client: Optional[aioredis.Redis] = None,
    ):
        self._backend = backend
        self._redis_client = redis_client
        self.backend_name = backend_name if backend is not None else "disabled"

    @property
    def enabled(self) -> bool:
        return self._backend is not None

    async def _get_raw(self, key: str) -> Optional[str]:
        if self._backend is None:
            return None
        try:
            value = await self._backend.get(key)
        except Exception as e:
            logger.warning("Cache get failed", key=key, error=str(e))
            return None

        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def _set_raw(self, key: str, value: str, ttl: Optional[int]) -> bool:
        if self._backend is None:
            return False
        try:
            await self._backend.set(key, value.encode("utf-8"), expire=ttl)
            return True
        except Exception as e:
            logger.warning("Cache set failed", key=key, error=str(e))
            return False

    async def get_json(self, key: str) -> Optional[Any]:
        """Read a JSON value; ``None`` on miss, failure or corrupt entry."""
        raw = await self._get_raw(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("Cache entry is not valid JSON", key=key, error=str(e))
            return None

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return await self._set_raw(key, json.dumps(value, default=str), ttl)

    async def get_bytes(self, key: str) -> Optional[bytes]:
        """Read a base64-encoded binary value."""
        raw = await self._get_raw(key)
        if raw is None:
            return None
        try:
            return base64.b64decode(raw, validate=True)
        except ValueError as e:
            logger.warning("Cache entry is not valid base64", key=key, error=str(e))
            return None

    async def set_bytes(
        self, key: str, value: bytes, ttl: Optional[int] = None
    ) -> bool:
        return await self._set_raw(key, base64.b64encode(value).decode("ascii"), ttl)

    async def delete(self, key: str) -> bool:
        """Delete one key. Deleting an absent key is a no-op."""
        if self._backend is None:
            return False
        try:
            await self._backend.clear(key=key)
            return True
        except KeyError:
            # In-memory backend raises on unknown keys
            return True
        except Exception as e:
            logger.warning("Cache delete failed", key=key, error=str(e))
            return False

    async def delete_many(self, keys: Iterable[str]) -> bool:
        results = [await self.delete(key) for key in keys]
        return all(results)

    async def close(self) -> None:
        """Close the Redis connection pool, if any."""
        if self._redis_client is not None:
            try:
                await self._redis_client.aclose()
                logger.info("Cache connections closed", backend=self.backend_name)
            except Exception as e:
                logger.error("Error closing cache connections", error=str(e))
        else:
            logger.debug("Cache shutdown complete", backend=self.backend_name)

    def status(self, app_settings: Settings) -> dict:
        """
        Get current cache status for health/status endpoints.

        Returns:
            dict with cache configuration and status
        """
        return {
            "enabled": app_settings.CACHE_ENABLED,
            "backend": self.backend_name,
            "configured_backend": app_settings.CACHE_BACKEND,
            "ttl_settings": {
                "books_list": app_settings.CACHE_BOOKS_LIST_TTL,
                "pdf_file": app_settings.CACHE_PDF_FILE_TTL,
                "book_detail": app_settings.CACHE_BOOK_DETAIL_TTL,
            },
        }


async def init_cache(app_settings: Settings) -> CacheGateway:
    """
    Build the cache gateway based on configuration.

    Called during application startup. Falls back gracefully:
    - If Redis configured but unavailable -> falls back to memory
    - If cache disabled -> gateway that always misses
    """
    if not app_settings.CACHE_ENABLED:
        logger.info("Cache disabled by configuration (CACHE_ENABLED=false)")
        return CacheGateway(None)

    backend = app_settings.CACHE_BACKEND.lower()
    redis_url = app_settings.resolved_redis_url

    if backend == "redis" and not redis_url:
        logger.warning(
            "REDIS_URL/REDIS_HOST not configured, falling back to memory cache"
        )
        backend = "memory"

    if backend == "redis":
        redis_client = None
        try:
            redis_client = aioredis.from_url(
                redis_url,
                encoding="utf-8",
                decode_responses=True,
            )

            await redis_client.ping()

            logger.info(
                "Cache initialized with Redis backend",
                host=app_settings.REDIS_HOST,
                port=app_settings.REDIS_PORT,
                db=app_settings.REDIS_DB,
            )
            return CacheGateway(
                RedisBackend(redis_client), "redis", redis_client=redis_client
            )

        except Exception as e:
            logger.error(
                "Failed to connect to Redis, falling back to memory cache",
                error=str(e),
            )
            if redis_client is not None:
                try:
                    await redis_client.aclose()
                except Exception as close_error:
                    logger.debug(
                        "Error closing Redis client", error=str(close_error)
                    )
            logger.info("Cache initialized with InMemory backend (Redis fallback)")
            return CacheGateway(InMemoryBackend(), "memory")

    logger.info("Cache initialized with InMemory backend")
    return CacheGateway(InMemoryBackend(), "memory")
