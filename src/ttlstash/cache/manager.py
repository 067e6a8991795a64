# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Backend selection and the two pre-built cache instances.

:func:`get_durable_cache` and :func:`get_volatile_cache` return process-wide
:class:`~ttlstash.cache.ttl_cache.TtlCache` singletons that differ only in
their backend.  Both are built lazily from application settings.
"""

from __future__ import annotations

import logging

from ttlstash.cache.base import StoreBackend
from ttlstash.cache.memory import VolatileBackend
from ttlstash.cache.sqlite import SQLiteBackend
from ttlstash.cache.ttl_cache import TtlCache
from ttlstash.core.config import Settings, get_settings
from ttlstash.core.constants import BackendKind
from ttlstash.core.exceptions import ConfigurationError

logger = logging.getLogger("ttlstash.cache.manager")

# Module-level singletons
_durable: TtlCache | None = None
_volatile: TtlCache | None = None


def _create_durable_backend(settings: Settings) -> StoreBackend:
    """Instantiate the durable backend named by ``settings.durable_backend``."""
    backend_type = settings.durable_backend

    if backend_type == "redis":
        from ttlstash.cache.redis import RedisBackend, redis_available

        if not redis_available():
            logger.warning(
                "Redis durable backend requested but redis package not installed. "
                "Falling back to SQLite at %s.",
                settings.db_path,
            )
            return SQLiteBackend(settings.db_path, namespace=settings.namespace)
        return RedisBackend(settings.redis_url, key_prefix=settings.redis_key_prefix)

    if backend_type == "sqlite":
        return SQLiteBackend(settings.db_path, namespace=settings.namespace)

    msg = f"Unknown durable backend: {backend_type!r}. Expected 'sqlite' or 'redis'."
    raise ConfigurationError(msg)


def create_backend(kind: BackendKind | str, settings: Settings | None = None) -> StoreBackend:
    """Build a backend of the requested *kind*.

    Raises:
        ConfigurationError: for an unknown kind or durable backend name.
    """
    try:
        kind = BackendKind(kind)
    except ValueError as exc:
        msg = f"Unknown backend kind: {kind!r}. Expected 'durable' or 'volatile'."
        raise ConfigurationError(msg) from exc

    if kind is BackendKind.VOLATILE:
        return VolatileBackend()
    return _create_durable_backend(settings or get_settings())


def create_cache(kind: BackendKind | str, settings: Settings | None = None) -> TtlCache:
    """Build a :class:`TtlCache` whose global TTL starts at ``settings.default_ttl``.

    A volatile cache is also handed the configured durable store, so that
    both kinds answer :meth:`TtlCache.is_backing_store_available` about it.
    """
    settings = settings or get_settings()
    backend = create_backend(kind, settings)
    durable = backend if backend.durable else _create_durable_backend(settings)
    logger.debug("Created %s cache (default_ttl=%s)", backend.kind, settings.default_ttl)
    return TtlCache(backend, global_ttl=settings.default_ttl, durable_backend=durable)


def get_durable_cache() -> TtlCache:
    """Return the module-level durable :class:`TtlCache` singleton.

    Creates it on first call using application settings.
    """
    global _durable
    if _durable is None:
        _durable = create_cache(BackendKind.DURABLE)
    return _durable


def get_volatile_cache() -> TtlCache:
    """Return the module-level volatile :class:`TtlCache` singleton."""
    global _volatile
    if _volatile is None:
        _volatile = create_cache(BackendKind.VOLATILE)
    return _volatile


def reset_caches() -> None:
    """Forget both singletons (useful for testing)."""
    global _durable, _volatile
    _durable = None
    _volatile = None
