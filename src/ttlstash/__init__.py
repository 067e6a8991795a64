# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""ttlstash - TTL-aware key-value cache over durable and volatile stores."""

__version__ = "0.1.0"

from ttlstash.cache import (
    CacheStats,
    Entry,
    TtlCache,
    create_cache,
    get_durable_cache,
    get_volatile_cache,
    reset_caches,
)
from ttlstash.core.constants import BackendKind
from ttlstash.core.exceptions import (
    ConfigurationError,
    InvalidTtlError,
    StorageError,
    TtlStashError,
)
from ttlstash.core.logging import configure_logging

__all__ = [
    "BackendKind",
    "CacheStats",
    "ConfigurationError",
    "Entry",
    "InvalidTtlError",
    "StorageError",
    "TtlCache",
    "TtlStashError",
    "__version__",
    "configure_logging",
    "create_cache",
    "get_durable_cache",
    "get_volatile_cache",
    "reset_caches",
]
