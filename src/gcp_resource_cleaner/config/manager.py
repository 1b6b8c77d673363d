"""Configuration manager — read/write TOML config, resolve run settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError

from gcp_resource_cleaner.client.errors import ConfigurationError
from gcp_resource_cleaner.config.constants import (
    CONFIG_FILE,
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_GCLOUD,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    ENV_CONCURRENCY,
    ENV_CONCURRENCY_LIMIT,
    ENV_FOLDER_ID,
    ENV_GCLOUD,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
    ENV_PROFILE,
)
from gcp_resource_cleaner.config.models import (
    CleanerProfile,
    CLIConfig,
    ConcurrencySettings,
    RunSettings,
)

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got '{raw}'")


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'") from None


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


class ConfigManager:
    """Manages CLI configuration on disk and resolves cleaner profiles."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or CONFIG_FILE
        self._config: CLIConfig | None = None

    @property
    def config(self) -> CLIConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> CLIConfig:
        if not self.config_path.exists():
            return CLIConfig()
        raw = self.config_path.read_bytes()
        try:
            data = tomllib.loads(raw.decode())
            profiles: dict[str, CleanerProfile] = {}
            for name, prof_data in data.get("profiles", {}).items():
                profiles[name] = CleanerProfile(name=name, **prof_data)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError, ValidationError, TypeError) as exc:
            raise ConfigurationError(
                f"Invalid config file {self.config_path}: {exc}"
            ) from exc
        return CLIConfig(
            default_profile=data.get("default_profile"),
            profiles=profiles,
        )

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        # Secure directory permissions (owner-only)
        os.chmod(self.config_path.parent, 0o700)
        data: dict[str, Any] = {}
        if self.config.default_profile:
            data["default_profile"] = self.config.default_profile
        if self.config.profiles:
            data["profiles"] = {
                name: profile.model_dump(exclude={"name"}, exclude_none=True)
                for name, profile in self.config.profiles.items()
            }
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.rename(self.config_path)

    def add_profile(self, profile: CleanerProfile) -> None:
        self.config.profiles[profile.name] = profile
        if not self.config.default_profile:
            self.config.default_profile = profile.name
        self.save()

    def remove_profile(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        del self.config.profiles[name]
        if self.config.default_profile == name:
            self.config.default_profile = next(iter(self.config.profiles), None)
        self.save()
        return True

    def set_default(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        self.config.default_profile = name
        self.save()
        return True

    def get_profile(self, name: str | None = None) -> CleanerProfile | None:
        if name:
            return self.config.profiles.get(name)
        default = self.config.default_profile
        if default:
            return self.config.profiles.get(default)
        return None

    def resolve_settings(
        self,
        profile_name: str | None = None,
        *,
        folder_id: str | None = None,
        dry_run: bool = False,
        concurrency: bool | None = None,
        concurrency_limit: int | None = None,
        log_level: str | None = None,
        log_format: str | None = None,
    ) -> RunSettings:
        """Resolve the settings for one run.

        Precedence: CLI flags > env vars > config profile > defaults.
        """
        requested = profile_name or os.environ.get(ENV_PROFILE)
        profile = self.get_profile(requested)
        if requested and profile is None:
            raise ConfigurationError(f"Profile '{requested}' not found.")

        def from_profile(attr: str) -> Any:
            return getattr(profile, attr) if profile else None

        try:
            return RunSettings(
                profile=profile.name if profile else None,
                folder_id=_first(
                    folder_id, os.environ.get(ENV_FOLDER_ID), from_profile("folder_id"), "",
                ),
                dry_run=dry_run,
                concurrency=ConcurrencySettings(
                    enabled=_first(
                        concurrency, _env_bool(ENV_CONCURRENCY),
                        from_profile("concurrency"), False,
                    ),
                    limit=_first(
                        concurrency_limit, _env_int(ENV_CONCURRENCY_LIMIT),
                        from_profile("concurrency_limit"), DEFAULT_CONCURRENCY_LIMIT,
                    ),
                ),
                log_level=_first(
                    log_level, os.environ.get(ENV_LOG_LEVEL),
                    from_profile("log_level"), DEFAULT_LOG_LEVEL,
                ),
                log_format=_first(
                    log_format, os.environ.get(ENV_LOG_FORMAT),
                    from_profile("log_format"), DEFAULT_LOG_FORMAT,
                ),
                gcloud=_first(
                    os.environ.get(ENV_GCLOUD), from_profile("gcloud"), DEFAULT_GCLOUD,
                ),
                command_timeout=from_profile("command_timeout"),
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid settings: {exc}") from exc
