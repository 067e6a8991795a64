# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Durable Redis backend using the ``redis`` async client.

This backend is **optional** -- if the ``redis`` package is not installed
the module can still be imported but :class:`RedisBackend` will raise
a clear error at instantiation time.

TTLs are never delegated to Redis: records are plain strings and expiry is
decided by the cache on read or during a garbage-collection sweep.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from ttlstash.cache.base import StoreBackend
from ttlstash.core.constants import BackendKind
from ttlstash.core.exceptions import ConfigurationError, StorageError

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger("ttlstash.cache.redis")

DEFAULT_KEY_PREFIX = "ttlstash:"

try:
    import redis.asyncio as aioredis
    from redis.exceptions import RedisError

    _REDIS_AVAILABLE = True
    _IO_ERRORS: tuple[type[Exception], ...] = (RedisError, OSError)
except ImportError:  # pragma: no cover
    aioredis = None  # type: ignore[assignment]
    _REDIS_AVAILABLE = False
    _IO_ERRORS = (OSError,)


def redis_available() -> bool:
    """Return ``True`` if the ``redis`` package is installed."""
    return _REDIS_AVAILABLE


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise connection and server errors as :class:`StorageError`."""
    try:
        yield
    except _IO_ERRORS as exc:
        raise StorageError(f"Redis {operation} failed: {exc}") from exc


class RedisBackend(StoreBackend):
    """Redis-backed record store shared by every process using the same prefix.

    Args:
        redis_url: Redis connection URL (e.g. ``redis://localhost:6379/0``).
        key_prefix: Namespace prepended to every key.
        client: An already-constructed async client; skips URL handling.
    """

    kind = BackendKind.DURABLE

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        *,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        client: Redis | None = None,
    ) -> None:
        self._prefix = key_prefix
        if client is not None:
            self._client = client
            return
        if not _REDIS_AVAILABLE:
            raise ConfigurationError(
                "The 'redis' package is required for the Redis durable backend. "
                "Install it with: pip install 'ttlstash[redis]'"
            )
        self._client = aioredis.from_url(redis_url, decode_responses=True)

    # ------------------------------------------------------------------
    # StoreBackend interface
    # ------------------------------------------------------------------

    async def read_raw(self, key: str) -> str | None:
        with _storage_errors("read"):
            result = await self._client.get(self._prefixed(key))
        return str(result) if result is not None else None

    async def write_raw(self, key: str, record: str) -> None:
        with _storage_errors("write"):
            await self._client.set(self._prefixed(key), record)

    async def delete_raw(self, key: str) -> bool:
        with _storage_errors("delete"):
            result = await self._client.delete(self._prefixed(key))
        return bool(result)

    async def list_keys(self) -> list[str]:
        """List keys carrying this backend's prefix.

        Uses SCAN to avoid blocking Redis with a KEYS command.
        """
        keys: list[str] = []
        with _storage_errors("scan"):
            async for key in self._client.scan_iter(match=f"{self._prefix}*"):
                keys.append(self._unprefixed(key))
        return keys

    async def clear_all(self) -> int:
        """Delete all keys with this backend's prefix."""
        count = 0
        with _storage_errors("clear"):
            async for key in self._client.scan_iter(match=f"{self._prefix}*"):
                await self._client.delete(key)
                count += 1
        return count

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _prefixed(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _unprefixed(self, key: str | bytes) -> str:
        if isinstance(key, bytes):
            key = key.decode()
        return key[len(self._prefix):]
