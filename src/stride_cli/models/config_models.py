"""Configuration models for STRIDE CLI."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class StorageConfig(BaseModel):
    """Local storage configuration."""

    backend: Literal["file", "memory"] = Field(
        default="file", description="Where the local adapter keeps its data"
    )
    data_dir: str | None = Field(
        default=None, description="Override for the data directory (file backend)"
    )
    quota_bytes: int | None = Field(
        default=5 * 1024 * 1024, description="Per-storage quota, None for unlimited"
    )
    seed_on_empty: bool = Field(
        default=True, description="Fall back to the demo dataset on empty/invalid data"
    )

    @field_validator("quota_bytes")
    @classmethod
    def validate_quota(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("quota_bytes must be positive")
        return v


class SyncConfig(BaseModel):
    """Optimistic sync configuration."""

    rollback: Literal["store", "aggregate"] = Field(
        default="store", description="What a failed mutation restores"
    )


class UserConfig(BaseModel):
    """Identity used when the CLI authors notes and invites."""

    name: str = Field(default="Local User")
    email: str = Field(default="")
    initials: str = Field(default="LU")


class AppConfig(BaseModel):
    """Main STRIDE configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    user: UserConfig = Field(default_factory=UserConfig)
