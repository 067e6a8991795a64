# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations and record-format constants."""

from enum import StrEnum


class BackendKind(StrEnum):
    DURABLE = "durable"
    VOLATILE = "volatile"


# Field names of an encoded durable record
VALUE_FIELD = "v"
STORED_AT_FIELD = "t"
KEY_TTL_FIELD = "kt"
RECORD_FIELDS = frozenset({VALUE_FIELD, STORED_AT_FIELD, KEY_TTL_FIELD})

# Prefix of the disposable key written by availability checks
SCRATCH_KEY_PREFIX = "__ttlstash_scratch__"

SQLITE_TABLE = "ttlstash_entries"
