"""Key store options: location (as a ``file:`` URI) and type."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from VfsKit.FileOptions.base import AbstractFileOption, JsonValue, StringFileOption
from VfsKit.FileOptions.registry import file_option
from VfsKit.FileOptions.validators import (
    path_to_uri,
    require_absolute_path,
    require_path_via_uri,
)

__all__ = ["HttpKeyStoreFile", "HttpKeyStoreType"]


@file_option
@dataclass(frozen=True, eq=False)
class HttpKeyStoreFile(AbstractFileOption):
    """Absolute path of the local key store file.

    Native construction takes a path; JSON construction takes a ``file:`` URI
    such as ``"file:///etc/keystore.p12"``.  Relative paths are rejected either
    way.
    """

    NAME = "http:keyStoreFileUri"

    value: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", require_absolute_path(self.value, self.NAME))

    @classmethod
    def from_json(cls, value: JsonValue) -> "HttpKeyStoreFile":
        return cls(require_path_via_uri(value, cls.NAME))

    def get_value(self) -> str:
        return path_to_uri(self.value)

    def _apply(self, context: Any) -> None:
        context.set_key_store_file(str(self.value))


@file_option
@dataclass(frozen=True, eq=False)
class HttpKeyStoreType(StringFileOption):
    """Key store type, for example ``PKCS12``."""

    NAME = "http:keyStoreType"
    ALLOW_BLANK = False

    def _apply(self, context: Any) -> None:
        context.set_key_store_type(self.value)
