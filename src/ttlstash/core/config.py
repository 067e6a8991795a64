# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables and .env files."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TTLSTASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Durable store
    durable_backend: str = "sqlite"  # "sqlite" or "redis"
    db_path: Path = Path("ttlstash.db")
    namespace: str = "default"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "ttlstash:"

    @field_validator("durable_backend", mode="before")
    @classmethod
    def _normalise_backend(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # Cache
    default_ttl: int | None = None  # seconds; None disables the global TTL

    @field_validator("default_ttl")
    @classmethod
    def _check_default_ttl(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("default_ttl must be a positive integer")
        return v

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


def get_settings() -> Settings:
    return Settings()
