# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract backing-store interface used by :class:`~ttlstash.cache.ttl_cache.TtlCache`."""

from __future__ import annotations

import abc
import logging
import time
from typing import Any, ClassVar

from ttlstash.core.constants import SCRATCH_KEY_PREFIX, BackendKind

logger = logging.getLogger("ttlstash.cache.base")


class StoreBackend(abc.ABC):
    """Raw key/record primitives shared by the durable and volatile stores.

    Backends know nothing about TTLs.  A volatile backend holds
    :class:`~ttlstash.cache.entry.Entry` objects as-is; a durable backend
    holds encoded strings and may contain foreign records written by
    something other than this package.
    """

    kind: ClassVar[BackendKind]

    @abc.abstractmethod
    async def read_raw(self, key: str) -> Any | None:
        """Return the stored record for *key*, or ``None`` if absent."""

    @abc.abstractmethod
    async def write_raw(self, key: str, record: Any) -> None:
        """Store *record* under *key*, replacing any previous record."""

    @abc.abstractmethod
    async def delete_raw(self, key: str) -> bool:
        """Delete *key*.

        Returns:
            ``True`` if the key existed and was deleted, ``False`` otherwise.
        """

    @abc.abstractmethod
    async def list_keys(self) -> list[str]:
        """Return every stored key in enumeration order."""

    @abc.abstractmethod
    async def clear_all(self) -> int:
        """Remove every record.

        Returns:
            The number of keys removed.
        """

    @abc.abstractmethod
    async def close(self) -> None:
        """Release any resources held by the backend."""

    @property
    def durable(self) -> bool:
        return self.kind is BackendKind.DURABLE

    async def is_available(self) -> bool:
        """Test the store with a disposable write followed by a delete.

        Never raises; any failure is reported as ``False``.
        """
        scratch_key = f"{SCRATCH_KEY_PREFIX}{time.time_ns()}"
        try:
            await self.write_raw(scratch_key, scratch_key)
            await self.delete_raw(scratch_key)
        except Exception as exc:
            logger.debug("%s store unavailable: %s", self.kind, exc)
            return False
        return True
