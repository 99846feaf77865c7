# === NAVMAP v1 ===
# {
#   "module": "VfsKit.FileOptions.settings",
#   "purpose": "Environment-driven settings for file option discovery and logging",
#   "sections": [
#     {"id": "settings", "name": "FileOptionSettings", "anchor": "SET", "kind": "api"},
#     {"id": "cache", "name": "Cached accessors", "anchor": "CAC", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Settings for the file option layer.

Values are read from ``VFSKIT_*`` environment variables through
``pydantic-settings``.  The settings control where resolver plugins are
discovered and how the ``VfsKit`` logger is configured; they never change the
validation rules of individual options.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "DEFAULT_ENTRY_POINT_GROUP",
    "FileOptionSettings",
    "get_settings",
    "reset_settings",
]

DEFAULT_ENTRY_POINT_GROUP = "vfskit.file_options"

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class FileOptionSettings(BaseSettings):
    """Process-wide settings for resolver discovery and logging."""

    model_config = SettingsConfigDict(
        env_prefix="VFSKIT_", case_sensitive=False, extra="ignore", frozen=True
    )

    log_level: str = Field(default="INFO", description="Logging level for the VfsKit logger")
    log_file: Optional[Path] = Field(
        default=None, description="Optional JSON-lines log file for the VfsKit logger"
    )
    load_entry_points: bool = Field(
        default=True, description="Discover third-party option resolvers via entry points"
    )
    entry_point_group: str = Field(
        default=DEFAULT_ENTRY_POINT_GROUP,
        min_length=1,
        description="Entry-point group scanned for option resolvers",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        """Normalize and validate logging level."""
        upper = str(value).upper()
        if upper not in _VALID_LEVELS:
            raise ValueError(f"log_level must be one of {list(_VALID_LEVELS)}, got '{value}'")
        return upper

    def level_int(self) -> int:
        """Convert level string to logging module integer."""
        return getattr(logging, self.log_level)


_settings: Optional[FileOptionSettings] = None
_settings_lock = threading.Lock()


def get_settings() -> FileOptionSettings:
    """Return the cached settings, reading the environment on first use."""

    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = FileOptionSettings()
        return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""

    global _settings
    with _settings_lock:
        _settings = None
