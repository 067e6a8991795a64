# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for ttlstash."""


class TtlStashError(Exception):
    """Base exception for all ttlstash errors."""


class ConfigurationError(TtlStashError):
    """Invalid or missing configuration."""


class InvalidTtlError(TtlStashError, ValueError):
    """A TTL was supplied that is not a strictly positive integer."""

    def __init__(self, value: object, scope: str = "global") -> None:
        self.value = value
        self.scope = scope
        super().__init__(
            f"{value!r} is not a positive integer required when setting a {scope} TTL"
        )


class StorageError(TtlStashError):
    """The durable store could not be opened or initialised."""
