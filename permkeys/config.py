# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Generator configuration loaded from the environment."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from permkeys.keys.validation import is_valid_identifier

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Settings for a generation run.

    Values come from ``PERMKEYS_*`` environment variables or a ``.env``
    file; command-line options override them.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERMKEYS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    declarations_directory: Path = Path("declarations")
    output_directory: Path | None = None
    root_namespace: str = "App.PermissionKeys"
    file_extension: str = "ts"
    max_entries_per_module: int = Field(default=1000, ge=1)
    log_level: str = "INFO"

    @field_validator("root_namespace")
    @classmethod
    def validate_root_namespace(cls, value: str) -> str:
        parts = value.split(".")
        if not all(is_valid_identifier(part) for part in parts):
            raise ValueError(
                f"Invalid root namespace '{value}'. "
                "Use dot-separated identifiers, e.g. 'App.PermissionKeys'."
            )
        return value

    @field_validator("file_extension")
    @classmethod
    def strip_extension_dot(cls, value: str) -> str:
        value = value.lstrip(".")
        if not value or not value.replace(".", "").isalnum():
            raise ValueError(f"Invalid file extension '{value}'")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Return the environment settings, read on first use."""
    return Settings()
