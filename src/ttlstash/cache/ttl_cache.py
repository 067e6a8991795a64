# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""TTL-aware key-value cache over a durable or volatile backend.

The :class:`TtlCache` is the primary public interface of the package.  It
writes :class:`~ttlstash.cache.entry.Entry` records through a
:class:`~ttlstash.cache.base.StoreBackend` and applies three staleness
policies on top of it: no TTL, a cache-wide TTL, and a per-key TTL that
overrides the cache-wide one.

Expiry is lazy.  Nothing is evicted until a read path (:meth:`TtlCache.get`,
:meth:`TtlCache.key_exists`) observes a stale entry, or until
:meth:`TtlCache.run_garbage_collector` is called explicitly.  No background
task is ever started.

An unreachable store never raises out of a cache operation: the failure is
logged and the operation degrades to its "nothing there" result.  Only
:meth:`TtlCache.is_backing_store_available` reports availability.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from ttlstash.cache.base import StoreBackend
from ttlstash.cache.entry import (
    DecodedRecord,
    Entry,
    decode_record,
    encode_record,
    is_stale,
    now_seconds,
    validate_ttl,
)
from ttlstash.cache.memory import VolatileBackend
from ttlstash.core.constants import BackendKind
from ttlstash.core.exceptions import StorageError

logger = logging.getLogger("ttlstash.cache.ttl_cache")

_UNSET: Any = object()


class CacheStats:
    """Simple hit/miss/expiry counter."""

    __slots__ = ("expired", "hits", "misses")

    def __init__(self) -> None:
        self.hits: int = 0
        self.misses: int = 0
        self.expired: int = 0

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return self.hits / self.total if self.total else 0.0

    def to_dict(self) -> dict[str, object]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "expired": self.expired,
            "total": self.total,
            "hit_rate": round(self.hit_rate, 4),
        }


class TtlCache:
    """Key-value cache with lazy, TTL-based expiry.

    Every public coroutine runs under one :class:`asyncio.Lock`, so two
    operations on the same cache never interleave.

    Args:
        backend: Backing store; defaults to a fresh :class:`VolatileBackend`.
        global_ttl: Initial cache-wide TTL in seconds, or ``None``.
        clock: Returns wall-clock seconds since the epoch.  Injectable so
            elapsed time can be simulated.
        durable_backend: Durable store checked by
            :meth:`is_backing_store_available`.  Defaults to *backend* when
            that is durable; a volatile cache without one reports the
            durable store as unavailable.

    Raises:
        InvalidTtlError: if *global_ttl* is not ``None`` or a positive int.
    """

    def __init__(
        self,
        backend: StoreBackend | None = None,
        *,
        global_ttl: int | None = None,
        clock: Callable[[], float] = time.time,
        durable_backend: StoreBackend | None = None,
    ) -> None:
        self._backend = backend or VolatileBackend()
        self._global_ttl = validate_ttl(global_ttl)
        self._clock = clock
        self._lock = asyncio.Lock()
        self._stats = CacheStats()
        if durable_backend is None and self._backend.durable:
            durable_backend = self._backend
        self._durable_backend = durable_backend

    # ------------------------------------------------------------------
    # Global TTL
    # ------------------------------------------------------------------

    @property
    def global_ttl(self) -> int | None:
        """TTL in seconds for every key without a key-level TTL."""
        return self._global_ttl

    @global_ttl.setter
    def global_ttl(self, seconds: int | None) -> None:
        self._global_ttl = validate_ttl(seconds)
        logger.debug("Global TTL set to %s", self._global_ttl)

    def set_global_ttl(self, seconds: int | None) -> None:
        """Set the cache-wide TTL; ``None`` disables it.

        Raises:
            InvalidTtlError: if *seconds* is not ``None`` or a positive int.
                The previous value is kept.
        """
        self.global_ttl = seconds

    def get_global_ttl(self) -> int | None:
        return self._global_ttl

    # ------------------------------------------------------------------
    # Cache operations
    # ------------------------------------------------------------------

    async def put(self, key: str, value: Any, key_ttl: int | None = None) -> None:
        """Store *value* under *key*, replacing any existing entry.

        The write always resets the key's clock, even if the previous entry
        had already expired.  Nothing is written if the store is unavailable.

        Args:
            key: Cache key.
            value: Data to store.  Must be JSON-serialisable for a durable
                backend.
            key_ttl: Optional TTL in seconds for this key alone.  Overrides
                the global TTL.

        Raises:
            InvalidTtlError: if *key_ttl* is invalid; nothing is written.
        """
        validate_ttl(key_ttl, scope="key-level")
        async with self._lock:
            entry = Entry(value=value, stored_at=self._now(), key_ttl=key_ttl)
            record = encode_record(entry) if self._backend.durable else entry
            try:
                await self._backend.write_raw(key, record)
            except StorageError as exc:
                self._log_unavailable("put", exc)
                return
        logger.debug("Stored key %r (key_ttl=%s)", key, key_ttl)

    async def get(self, key: str, default: Any = _UNSET) -> Any:
        """Return the value stored under *key*.

        Returns *default* (``None`` when not given) if the key is absent,
        its entry has expired, or the store is unavailable; an expired entry
        is deleted.  A durable record that cannot be decoded yields *default*
        when one was passed and the raw stored string otherwise.
        """
        missing = None if default is _UNSET else default
        async with self._lock:
            try:
                decoded = await self._load(key)
                if decoded is None:
                    self._stats.misses += 1
                    logger.debug("Cache MISS for key %r", key)
                    return missing

                if not decoded.ok:
                    logger.debug("Key %r holds a foreign record", key)
                    return decoded.raw if default is _UNSET else default

                if await self._expire_if_stale(key, decoded.entry):
                    self._stats.misses += 1
                    return missing
            except StorageError as exc:
                self._log_unavailable("get", exc)
                return missing

            self._stats.hits += 1
            logger.debug("Cache HIT for key %r", key)
            return decoded.entry.value

    async def key_exists(self, key: str) -> bool:
        """Return ``True`` if *key* holds an entry that has not expired.

        An expired entry is deleted.  An undecodable durable record counts as
        present; an unavailable store counts as absent.
        """
        async with self._lock:
            try:
                decoded = await self._load(key)
                if decoded is None:
                    return False
                if not decoded.ok:
                    return True
                return not await self._expire_if_stale(key, decoded.entry)
            except StorageError as exc:
                self._log_unavailable("key_exists", exc)
                return False

    async def remove_key(self, key: str) -> None:
        """Delete *key*; does nothing if it is absent."""
        async with self._lock:
            try:
                await self._backend.delete_raw(key)
            except StorageError as exc:
                self._log_unavailable("remove_key", exc)

    async def clear(self) -> None:
        """Remove every entry from the backend regardless of TTL."""
        async with self._lock:
            try:
                count = await self._backend.clear_all()
            except StorageError as exc:
                self._log_unavailable("clear", exc)
                return
        logger.info("Cache cleared: %d entries removed", count)

    async def keys(self) -> list[str]:
        """Return all stored keys, including expired ones not yet purged."""
        async with self._lock:
            try:
                return await self._backend.list_keys()
            except StorageError as exc:
                self._log_unavailable("keys", exc)
                return []

    async def run_garbage_collector(self) -> list[str]:
        """Delete every expired entry and return the deleted keys.

        Only runs when called.  Foreign records and entries with no
        applicable TTL are left untouched.

        Returns:
            Removed keys in backend enumeration order, each once.  Empty if
            the store is unavailable.
        """
        removed: list[str] = []
        async with self._lock:
            now = self._now()
            try:
                for key in await self._backend.list_keys():
                    raw = await self._backend.read_raw(key)
                    if raw is None:
                        continue
                    decoded = decode_record(raw)
                    if not decoded.ok:
                        continue
                    if is_stale(decoded.entry, self._global_ttl, now):
                        await self._backend.delete_raw(key)
                        removed.append(key)
            except StorageError as exc:
                self._log_unavailable("run_garbage_collector", exc)
                return []
            finally:
                self._stats.expired += len(removed)
        logger.info("Garbage collector removed %d expired entries", len(removed))
        return removed

    async def is_backing_store_available(self) -> bool:
        """Return ``True`` if the durable store accepts a disposable write and delete."""
        if self._durable_backend is None:
            return False
        async with self._lock:
            return await self._durable_backend.is_available()

    # ------------------------------------------------------------------
    # Accessors and lifecycle
    # ------------------------------------------------------------------

    @property
    def backend_kind(self) -> BackendKind:
        return self._backend.kind

    @property
    def backend(self) -> StoreBackend:
        """Return the underlying store."""
        return self._backend

    @property
    def stats(self) -> CacheStats:
        """Return the hit/miss statistics object."""
        return self._stats

    async def close(self) -> None:
        """Release resources held by the backend and the checked durable store."""
        async with self._lock:
            await self._backend.close()
            if self._durable_backend is not None and self._durable_backend is not self._backend:
                await self._durable_backend.close()

    # ------------------------------------------------------------------
    # Internal helpers (callers hold the lock)
    # ------------------------------------------------------------------

    def _now(self) -> int:
        return now_seconds(self._clock)

    async def _load(self, key: str) -> DecodedRecord | None:
        raw = await self._backend.read_raw(key)
        if raw is None:
            return None
        return decode_record(raw)

    async def _expire_if_stale(self, key: str, entry: Entry) -> bool:
        if not is_stale(entry, self._global_ttl, self._now()):
            return False
        await self._backend.delete_raw(key)
        self._stats.expired += 1
        logger.debug("Expired key %r", key)
        return True

    def _log_unavailable(self, operation: str, exc: StorageError) -> None:
        logger.warning("%s store unavailable during %s: %s", self._backend.kind, operation, exc)
