# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache entries, the durable record codec, and the staleness predicate.

Every read path (``get``, ``key_exists``) and the garbage collector share
:func:`is_stale`, so all three agree on when an entry has expired.  A durable
record is the JSON object ``{"v": value, "t": stored_at, "kt": key_ttl}``;
anything else found in a durable store is foreign data and is reported by
:func:`decode_record` as a failed decode rather than raised.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ttlstash.core.constants import KEY_TTL_FIELD, RECORD_FIELDS, STORED_AT_FIELD, VALUE_FIELD
from ttlstash.core.exceptions import InvalidTtlError


class Entry(BaseModel):
    """The unit of storage: a value, when it was written, and its own TTL."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    value: Any = Field(alias=VALUE_FIELD)
    # Strict so foreign records such as {"t": "5", "kt": true} are not coerced
    stored_at: int = Field(alias=STORED_AT_FIELD, strict=True)
    key_ttl: int | None = Field(default=None, alias=KEY_TTL_FIELD, strict=True)


@dataclass(frozen=True, slots=True)
class DecodedRecord:
    """Outcome of decoding a raw record read from a backend.

    ``entry`` is ``None`` when the raw value is not a well-formed entry;
    ``raw`` always holds what the backend returned.
    """

    raw: Any
    entry: Entry | None = None

    @property
    def ok(self) -> bool:
        return self.entry is not None


def now_seconds(clock=time.time) -> int:
    """Wall-clock seconds since the epoch, truncated to an integer."""
    return int(clock())


def validate_ttl(value: object, *, scope: str = "global") -> int | None:
    """Return *value* if it is ``None`` or a strictly positive ``int``.

    Integral floats such as ``3.0`` are rejected too; TTLs are never coerced.

    Raises:
        InvalidTtlError: for zero, negatives, floats, strings, bools and
            anything else.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidTtlError(value, scope)
    return value


def effective_ttl(entry: Entry, global_ttl: int | None) -> int | None:
    # The key-level TTL wins; the global TTL only fills in when it is absent.
    return entry.key_ttl if entry.key_ttl is not None else global_ttl


def is_stale(entry: Entry, global_ttl: int | None, now: int) -> bool:
    """Return ``True`` if an applicable TTL has elapsed for *entry*."""
    ttl = effective_ttl(entry, global_ttl)
    return ttl is not None and now - entry.stored_at > ttl


def encode_record(entry: Entry) -> str:
    """Serialise *entry* for a durable store.

    Raises ``TypeError`` if the value is not JSON-serialisable.
    """
    return json.dumps(
        {
            VALUE_FIELD: entry.value,
            STORED_AT_FIELD: entry.stored_at,
            KEY_TTL_FIELD: entry.key_ttl,
        },
        ensure_ascii=False,
    )


def decode_record(raw: Any) -> DecodedRecord:
    """Decode a raw backend value into an :class:`Entry` without raising."""
    if isinstance(raw, Entry):
        return DecodedRecord(raw=raw, entry=raw)
    if not isinstance(raw, (str, bytes, bytearray)):
        return DecodedRecord(raw=raw)
    try:
        data = json.loads(raw)
    except ValueError:
        return DecodedRecord(raw=raw)
    if not isinstance(data, dict) or not RECORD_FIELDS.issubset(data):
        return DecodedRecord(raw=raw)
    try:
        entry = Entry.model_validate(data)
    except ValidationError:
        return DecodedRecord(raw=raw)
    return DecodedRecord(raw=raw, entry=entry)
