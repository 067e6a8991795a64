# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Durable SQLite backend using :mod:`aiosqlite`.

Records are stored as text in a single table keyed by ``(namespace, key)``,
so several caches can share one database file without seeing each other's
keys.  The connection is opened lazily on first use.
"""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from ttlstash.cache.base import StoreBackend
from ttlstash.core.constants import SQLITE_TABLE, BackendKind
from ttlstash.core.exceptions import StorageError

logger = logging.getLogger("ttlstash.cache.sqlite")

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {SQLITE_TABLE} (
    namespace TEXT NOT NULL,
    key       TEXT NOT NULL,
    record    TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
)
"""


class SQLiteBackend(StoreBackend):
    """File-backed record table that survives process restarts.

    Args:
        db_path: Path of the SQLite database file (``":memory:"`` is accepted
            for tests, but is then not durable).
        namespace: Partition of the table owned by this backend.
    """

    kind = BackendKind.DURABLE

    def __init__(self, db_path: Path | str = "ttlstash.db", *, namespace: str = "default") -> None:
        self._db_path = str(db_path)
        self._namespace = namespace
        self._conn: aiosqlite.Connection | None = None

    @property
    def namespace(self) -> str:
        return self._namespace

    # ------------------------------------------------------------------
    # StoreBackend interface
    # ------------------------------------------------------------------

    async def read_raw(self, key: str) -> str | None:
        rows = await self._fetch_all(
            f"SELECT record FROM {SQLITE_TABLE} WHERE namespace = ? AND key = ?",
            (self._namespace, key),
        )
        return rows[0][0] if rows else None

    async def write_raw(self, key: str, record: str) -> None:
        await self._modify(
            f"INSERT INTO {SQLITE_TABLE} (namespace, key, record) VALUES (?, ?, ?) "
            "ON CONFLICT (namespace, key) DO UPDATE SET record = excluded.record",
            (self._namespace, key, str(record)),
        )

    async def delete_raw(self, key: str) -> bool:
        count = await self._modify(
            f"DELETE FROM {SQLITE_TABLE} WHERE namespace = ? AND key = ?",
            (self._namespace, key),
        )
        return count > 0

    async def list_keys(self) -> list[str]:
        rows = await self._fetch_all(
            f"SELECT key FROM {SQLITE_TABLE} WHERE namespace = ? ORDER BY rowid",
            (self._namespace,),
        )
        return [row[0] for row in rows]

    async def clear_all(self) -> int:
        return await self._modify(
            f"DELETE FROM {SQLITE_TABLE} WHERE namespace = ?",
            (self._namespace,),
        )

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_all(self, query: str, params: tuple[str, ...]) -> list[tuple[str, ...]]:
        conn = await self._connection()
        try:
            cursor = await conn.execute(query, params)
            return list(await cursor.fetchall())
        except aiosqlite.Error as exc:
            raise StorageError(f"Durable store read failed: {exc}") from exc

    async def _modify(self, query: str, params: tuple[str, ...]) -> int:
        """Execute and commit a write; return the number of affected rows."""
        conn = await self._connection()
        try:
            cursor = await conn.execute(query, params)
            await conn.commit()
        except aiosqlite.Error as exc:
            raise StorageError(f"Durable store write failed: {exc}") from exc
        return cursor.rowcount

    async def _connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn

        conn: aiosqlite.Connection | None = None
        try:
            conn = await aiosqlite.connect(self._db_path)
            # Enable WAL mode so other processes can read during writes
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute(_SCHEMA)
            await conn.commit()
        except Exception as exc:
            if conn is not None:
                await conn.close()
            msg = f"Failed to open durable store at {self._db_path}: {exc}"
            raise StorageError(msg) from exc

        logger.debug("Opened durable store %s (namespace=%s)", self._db_path, self._namespace)
        self._conn = conn
        return conn
