"""
Package settings management.

Settings that govern object-configure itself (not the objects it
configures), loaded from:
1. Default values
2. An optional YAML file
3. Environment variables (prefixed with OBJECT_CONFIGURE_)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HANDLE_LEVELS = ["trace", "debug", "info", "notice", "warning", "error", "critical"]


class LoggingConfig(BaseModel):
    """Configuration for the package's own diagnostics."""

    level: str = "WARNING"
    file: Optional[str] = None
    json_format: bool = False
    color: bool = True

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class HandleConfig(BaseModel):
    """Defaults for logger handles built by configure()."""

    default_level: str = "warning"
    syslog_socket: str = "/dev/log"
    syslog_host: str = "localhost"
    syslog_port: int = Field(default=514, ge=1, le=65535)

    @field_validator("default_level")
    @classmethod
    def validate_default_level(cls, v: str) -> str:
        """Validate handle threshold level."""
        if v.lower() not in HANDLE_LEVELS:
            raise ValueError(f"Handle level must be one of: {HANDLE_LEVELS}")
        return v.lower()


class Settings(BaseSettings):
    """
    Main settings class.

    Nested values can be set from the environment with a double
    underscore, e.g. ``OBJECT_CONFIGURE_HANDLE__DEFAULT_LEVEL=debug``.
    """

    model_config = SettingsConfigDict(
        env_prefix="OBJECT_CONFIGURE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    handle: HandleConfig = Field(default_factory=HandleConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Settings":
        """
        Load settings from a YAML file.

        Args:
            path: Path to YAML settings file.

        Returns:
            Settings instance with loaded values.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the settings are invalid.
        """
        settings_path = Path(path)
        if not settings_path.is_file():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(settings_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)


def find_settings_file() -> Optional[str]:
    """
    Find the settings file named by OBJECT_CONFIGURE_SETTINGS.

    Returns:
        Path to the settings file or None if unset or missing.
    """
    path = os.environ.get("OBJECT_CONFIGURE_SETTINGS")
    if path and Path(path).is_file():
        return path
    return None


@lru_cache
def get_settings(settings_path: Optional[str] = None) -> Settings:
    """
    Get settings singleton.

    Args:
        settings_path: Optional path to a YAML settings file.

    Returns:
        Settings instance.
    """
    if settings_path is None:
        settings_path = find_settings_file()

    if settings_path:
        return Settings.from_yaml(settings_path)

    return Settings()
