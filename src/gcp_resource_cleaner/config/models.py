"""Pydantic models for CLI configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from gcp_resource_cleaner.config.constants import (
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_GCLOUD,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    LOG_FORMATS,
    LOG_LEVELS,
)


def _check_log_level(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.lower()
    if v not in LOG_LEVELS:
        raise ValueError(f"Log level must be one of: {', '.join(LOG_LEVELS)}")
    return v


def _check_log_format(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.lower()
    if v not in LOG_FORMATS:
        raise ValueError(f"Log format must be one of: {', '.join(LOG_FORMATS)}")
    return v


class ConcurrencySettings(BaseModel):
    """Whether to fan out work, and how many gcloud processes may run at once."""

    enabled: bool = False
    limit: int = DEFAULT_CONCURRENCY_LIMIT

    @property
    def active(self) -> bool:
        # A non-positive limit means concurrency is off, not an error
        return self.enabled and self.limit >= 1


class CleanerProfile(BaseModel):
    """A named set of defaults for cleaner runs."""

    name: str
    folder_id: str | None = Field(default=None, description="Root folder id")
    concurrency: bool | None = Field(default=None, description="Enable concurrency")
    concurrency_limit: int | None = Field(
        default=None, description="Max concurrent gcloud processes",
    )
    log_level: str | None = None
    log_format: str | None = None
    gcloud: str | None = Field(default=None, description="Path to the gcloud binary")
    command_timeout: float | None = Field(
        default=None, gt=0, le=3600, description="Per-command timeout in seconds",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str | None:
        return _check_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str | None) -> str | None:
        return _check_log_format(v)


class CLIConfig(BaseModel):
    """Root configuration model."""

    default_profile: str | None = None
    profiles: dict[str, CleanerProfile] = Field(default_factory=dict)


class RunSettings(BaseModel):
    """Fully resolved settings for one invocation."""

    profile: str | None = None
    folder_id: str = ""
    dry_run: bool = False
    concurrency: ConcurrencySettings = Field(default_factory=ConcurrencySettings)
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    gcloud: str = DEFAULT_GCLOUD
    command_timeout: float | None = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return _check_log_level(v) or DEFAULT_LOG_LEVEL

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        return _check_log_format(v) or DEFAULT_LOG_FORMAT
