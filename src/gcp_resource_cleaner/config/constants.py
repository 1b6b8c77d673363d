"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "gcp-resource-cleaner"
APP_AUTHOR = "gcp-resource-cleaner"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_PROFILE = "GCP_CLEANER_PROFILE"
ENV_FOLDER_ID = "GCP_CLEANER_FOLDER_ID"
ENV_LOG_LEVEL = "GCP_CLEANER_LOG_LEVEL"
ENV_LOG_FORMAT = "GCP_CLEANER_LOG_FORMAT"
ENV_CONCURRENCY = "GCP_CLEANER_CONCURRENCY"
ENV_CONCURRENCY_LIMIT = "GCP_CLEANER_CONCURRENCY_LIMIT"
ENV_GCLOUD = "GCP_CLEANER_GCLOUD"

# Defaults
DEFAULT_GCLOUD = "gcloud"
DEFAULT_CONCURRENCY_LIMIT = 5
DEFAULT_LOG_LEVEL = "info"
DEFAULT_LOG_FORMAT = "pretty"

LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "fatal", "panic")
LOG_FORMATS = ("pretty", "json")

# Seconds between cancellation checks while blocked
POLL_INTERVAL = 0.05
