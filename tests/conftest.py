# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from ttlstash.cache.memory import VolatileBackend
from ttlstash.cache.sqlite import SQLiteBackend
from ttlstash.cache.ttl_cache import TtlCache

START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = START_TIME) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def sqlite_backend(tmp_path):
    backend = SQLiteBackend(tmp_path / "cache.db", namespace="tests")
    yield backend
    await backend.close()


@pytest.fixture(params=["volatile", "durable"])
async def cache(request, clock: FakeClock, tmp_path):
    """A TtlCache over each backend kind, driven by the fake clock."""
    if request.param == "volatile":
        backend = VolatileBackend()
    else:
        backend = SQLiteBackend(tmp_path / "cache.db", namespace="tests")
    ttl_cache = TtlCache(backend, clock=clock)
    yield ttl_cache
    await ttl_cache.close()


@pytest.fixture(autouse=True)
def _reset_caches():
    """Ensure the module-level cache singletons are cleared between tests."""
    from ttlstash.cache.manager import reset_caches

    reset_caches()
    yield
    reset_caches()
