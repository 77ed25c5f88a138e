"""Configuration settings using Pydantic Settings.

Provides typed library configuration with environment variable support.

Usage:
    from borrowkit.config import BorrowkitSettings, get_settings

    # Load from environment variables (BORROWKIT_*)
    settings = get_settings()

    # Or override with explicit values
    settings = BorrowkitSettings(max_coercion_depth=3)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BorrowkitSettings(BaseSettings):  # type: ignore[misc]
    """Library-wide tuning knobs.

    Attributes:
        max_coercion_depth: Maximum borrow hops a call-site coercion plan may use.
            The default of 2 allows one level of chaining (A -> B -> C).
        hash_digest_size: BLAKE2b digest size in bytes for stable hashing.
        hash_person: BLAKE2b personalisation string separating borrowkit hashes
            from other BLAKE2b users.

    Environment Variables:
        BORROWKIT_MAX_COERCION_DEPTH
        BORROWKIT_HASH_DIGEST_SIZE
        BORROWKIT_HASH_PERSON
    """

    model_config = SettingsConfigDict(
        env_prefix="BORROWKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_coercion_depth: int = Field(default=2, ge=1)
    hash_digest_size: int = Field(default=8, ge=1, le=16)
    hash_person: str = "borrowkit"

    @field_validator("hash_person")
    @classmethod
    def _person_fits_blake2b(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 16:
            raise ValueError("hash_person must encode to at most 16 bytes")
        return value


@lru_cache(maxsize=1)
def get_settings() -> BorrowkitSettings:
    """Return the process-wide settings, loaded once from the environment.

    Call ``get_settings.cache_clear()`` to reload after the environment changes.
    """
    return BorrowkitSettings()
