# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Volatile in-process backend.

Entries live in a plain insertion-ordered ``dict`` and are lost when the
process exits.  Records are stored as given, without serialisation.
"""

from __future__ import annotations

from typing import Any

from ttlstash.cache.base import StoreBackend
from ttlstash.core.constants import BackendKind


class VolatileBackend(StoreBackend):
    """In-memory record table."""

    kind = BackendKind.VOLATILE

    def __init__(self) -> None:
        self._store: dict[str, Any] = {}

    async def read_raw(self, key: str) -> Any | None:
        return self._store.get(key)

    async def write_raw(self, key: str, record: Any) -> None:
        # Overwriting an existing key keeps its enumeration position
        self._store[key] = record

    async def delete_raw(self, key: str) -> bool:
        try:
            del self._store[key]
        except KeyError:
            return False
        return True

    async def list_keys(self) -> list[str]:
        return list(self._store)

    async def clear_all(self) -> int:
        count = len(self._store)
        self._store.clear()
        return count

    async def close(self) -> None:
        self._store.clear()
