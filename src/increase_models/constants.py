"""Stable constants shared across increase-models packages."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Default runtime paths (relative to the working directory unless overridden by config).
DEFAULT_CONFIG_FILE_NAME: Final[str] = "increase.toml"
LOG_DIR: Final[PurePosixPath] = PurePosixPath("logs")
LOG_FILE_NAME: Final[str] = "increase-models.jsonl"

# Environment variable prefix for config overrides.
ENV_PREFIX: Final[str] = "INCREASE_"

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG_FILE_NAME",
    "ENV_PREFIX",
    "LOG_DIR",
    "LOG_FILE_NAME",
]
