# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for entries, TTL validation, staleness and the durable record codec."""

from __future__ import annotations

import json
import math

import pytest

from ttlstash.cache.entry import (
    DecodedRecord,
    Entry,
    decode_record,
    effective_ttl,
    encode_record,
    is_stale,
    now_seconds,
    validate_ttl,
)
from ttlstash.core.exceptions import InvalidTtlError

# ---------------------------------------------------------------------------
# TTL validation
# ---------------------------------------------------------------------------


class TestValidateTtl:
    @pytest.mark.parametrize("value", [1, 3, 3600, 10**9])
    def test_accepts_positive_integers(self, value: int) -> None:
        assert validate_ttl(value) == value

    def test_accepts_none(self) -> None:
        assert validate_ttl(None) is None

    @pytest.mark.parametrize(
        "value",
        [0, -5, 25.5, 3.0, "3600", True, False, math.inf, math.nan, [1], object()],
    )
    def test_rejects_everything_else(self, value: object) -> None:
        with pytest.raises(InvalidTtlError):
            validate_ttl(value)

    def test_error_names_value_and_scope(self) -> None:
        with pytest.raises(InvalidTtlError, match="key-level") as exc_info:
            validate_ttl(-1, scope="key-level")
        assert exc_info.value.value == -1
        assert isinstance(exc_info.value, ValueError)


# ---------------------------------------------------------------------------
# Staleness
# ---------------------------------------------------------------------------


class TestStaleness:
    def test_no_ttl_is_never_stale(self) -> None:
        entry = Entry(value="x", stored_at=0, key_ttl=None)
        assert is_stale(entry, None, 10**12) is False

    def test_global_ttl_applies_without_key_ttl(self) -> None:
        entry = Entry(value="x", stored_at=100, key_ttl=None)
        assert effective_ttl(entry, 3) == 3
        assert is_stale(entry, 3, 103) is False
        assert is_stale(entry, 3, 104) is True

    def test_key_ttl_overrides_global(self) -> None:
        entry = Entry(value="x", stored_at=100, key_ttl=1)
        assert effective_ttl(entry, 60) == 1
        assert is_stale(entry, 60, 102) is True

    def test_key_ttl_longer_than_global(self) -> None:
        entry = Entry(value="x", stored_at=100, key_ttl=20)
        assert is_stale(entry, 1, 110) is False

    def test_boundary_is_not_stale(self) -> None:
        """Expiry requires strictly more than the TTL to have elapsed."""
        entry = Entry(value="x", stored_at=100, key_ttl=5)
        assert is_stale(entry, None, 105) is False
        assert is_stale(entry, None, 106) is True

    def test_now_seconds_truncates(self) -> None:
        assert now_seconds(lambda: 1234.99) == 1234


# ---------------------------------------------------------------------------
# Record codec
# ---------------------------------------------------------------------------


class TestRecordCodec:
    def test_encode_uses_short_field_names(self) -> None:
        entry = Entry(value={"c": 23}, stored_at=1700000000, key_ttl=3)
        assert json.loads(encode_record(entry)) == {
            "v": {"c": 23},
            "t": 1700000000,
            "kt": 3,
        }

    def test_encode_null_key_ttl(self) -> None:
        entry = Entry(value="s", stored_at=1, key_ttl=None)
        assert json.loads(encode_record(entry))["kt"] is None

    def test_encode_rejects_unserialisable_value(self) -> None:
        with pytest.raises(TypeError):
            encode_record(Entry(value=object(), stored_at=1))

    def test_decode_encoded_entry(self) -> None:
        entry = Entry(value={"slang": ["wtf", "ttyl"], "n": [1, 2]}, stored_at=5, key_ttl=None)
        decoded = decode_record(encode_record(entry))
        assert decoded.ok
        assert decoded.entry == entry

    def test_decode_passes_entry_objects_through(self) -> None:
        entry = Entry(value=1, stored_at=5)
        assert decode_record(entry).entry is entry

    @pytest.mark.parametrize(
        "raw",
        [
            "not json at all",
            '"a json string"',
            "[1, 2, 3]",
            '{"v": 1, "t": 2}',
            '{"value": 1, "stored_at": 2, "kt": null}',
            '{"v": 1, "t": "yesterday", "kt": null}',
            '{"v": 1, "t": "5", "kt": true}',
            '{"v": 1, "t": 5.0, "kt": null}',
            42,
        ],
    )
    def test_decode_failure_keeps_raw(self, raw: object) -> None:
        decoded = decode_record(raw)
        assert decoded == DecodedRecord(raw=raw)
        assert decoded.ok is False
