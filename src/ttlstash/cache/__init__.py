# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""TTL-aware caching over durable and volatile backends."""

from ttlstash.cache.base import StoreBackend
from ttlstash.cache.entry import Entry
from ttlstash.cache.manager import (
    create_backend,
    create_cache,
    get_durable_cache,
    get_volatile_cache,
    reset_caches,
)
from ttlstash.cache.memory import VolatileBackend
from ttlstash.cache.sqlite import SQLiteBackend
from ttlstash.cache.ttl_cache import CacheStats, TtlCache

__all__ = [
    "CacheStats",
    "Entry",
    "SQLiteBackend",
    "StoreBackend",
    "TtlCache",
    "VolatileBackend",
    "create_backend",
    "create_cache",
    "get_durable_cache",
    "get_volatile_cache",
    "reset_caches",
]
