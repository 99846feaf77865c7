# === NAVMAP v1 ===
# {
#   "module": "VfsKit.FileOptions.errors",
#   "purpose": "Define the exception hierarchy used by file option construction, lookup, and application",
#   "sections": [
#     {"id": "base", "name": "Base Exceptions", "anchor": "BAS", "kind": "api"},
#     {"id": "construction", "name": "Construction Errors", "anchor": "CON", "kind": "api"},
#     {"id": "registry", "name": "Registry & Apply Errors", "anchor": "REG", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Exception hierarchy shared across file option construction, lookup, and application.

File options are validated eagerly: every failure surfaces from the constructor,
the ``from_json`` factory, or the registry lookup that detected it.  This module
groups those failures so callers can react to high-level categories (bad input
vs. unknown option vs. a context that refused a value) while the specialised
subclasses keep the finer distinctions from the option contract.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "FileOptionError",
    "OptionValueError",
    "MissingInputError",
    "InvalidFormatError",
    "InvalidValueError",
    "UnknownOptionError",
    "ApplyError",
]


class FileOptionError(RuntimeError):
    """Base exception for file option failures."""

    def __init__(self, message: str, *, option_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.option_name = option_name


class OptionValueError(FileOptionError, ValueError):
    """Raised when a file option cannot be constructed from the supplied input."""


class MissingInputError(OptionValueError):
    """Raised when a required top-level or nested value is ``None`` or absent."""


class InvalidFormatError(OptionValueError):
    """Raised when the input is not the JSON shape the option expects."""


class InvalidValueError(OptionValueError):
    """Raised when well-formed input fails semantic validation."""


class UnknownOptionError(FileOptionError, LookupError):
    """Raised when no resolver has been contributed for an option name."""


class ApplyError(FileOptionError):
    """Raised when the options context rejects an otherwise valid value."""
