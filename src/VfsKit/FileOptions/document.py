# === NAVMAP v1 ===
# {
#   "module": "VfsKit.FileOptions.document",
#   "purpose": "Load option documents (JSON/YAML mappings of name to value) into file options",
#   "sections": [
#     {"id": "collection", "name": "FileOptions collection", "anchor": "COL", "kind": "class"},
#     {"id": "loading", "name": "Document loading", "anchor": "LOA", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Option documents.

An option document is a JSON or YAML mapping whose keys are declared option
names and whose values are the JSON representation each option accepts::

    {
        "http:connectionTimeout": "PT30S",
        "http:tlsVersions": ["V_1_2", "V_1_3"],
        "http:proxyAuthenticator": {"id": "user", "password": "secret"}
    }

Entries are resolved through the registry in document order, so every
validation failure surfaces while loading rather than when the options are
applied.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

import yaml

from .base import FileOption, JsonValue
from .errors import InvalidFormatError
from .registry import resolve_all

__all__ = [
    "FileOptions",
    "resolve_file_options",
    "parse_file_options",
    "load_file_options",
]

_YAML_SUFFIXES = {".yaml", ".yml"}


@dataclass(frozen=True)
class FileOptions:
    """Ordered, immutable collection of resolved file options."""

    options: Tuple[FileOption, ...] = ()

    @classmethod
    def of(cls, options: Iterable[FileOption]) -> "FileOptions":
        return cls(tuple(options))

    def __iter__(self) -> Iterator[FileOption]:
        return iter(self.options)

    def __len__(self) -> int:
        return len(self.options)

    def get(self, name: str) -> Optional[FileOption]:
        """Return the last option declared under ``name``, if any."""

        found: Optional[FileOption] = None
        for option in self.options:
            if option.name == name:
                found = option
        return found

    def to_json(self) -> Dict[str, JsonValue]:
        """Return the document form ``{name: value}`` of every option."""

        return {option.name: option.get_value() for option in self.options}

    def apply(self, context: Any) -> None:
        """Apply every option to ``context`` in declaration order."""

        for option in self.options:
            option.apply(context)


def resolve_file_options(document: Mapping[str, JsonValue]) -> FileOptions:
    """Resolve an already-parsed option document."""

    if not isinstance(document, Mapping):
        raise InvalidFormatError("FileOption document must be a JSON object.")
    return FileOptions(resolve_all(document))


def parse_file_options(text: str, *, fmt: str = "json") -> FileOptions:
    """Parse option document ``text`` written as ``json`` or ``yaml``."""

    if fmt == "json":
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidFormatError(f"FileOption document is not valid JSON: {exc}") from exc
    elif fmt == "yaml":
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InvalidFormatError(f"FileOption document is not valid YAML: {exc}") from exc
    else:
        raise ValueError(f"Unsupported option document format: {fmt}")
    if document is None:
        document = {}
    return resolve_file_options(document)


def load_file_options(path: Path) -> FileOptions:
    """Read and resolve the option document stored at ``path``.

    ``.yaml``/``.yml`` files are parsed with PyYAML; anything else as JSON.
    """

    path = Path(path)
    fmt = "yaml" if path.suffix.lower() in _YAML_SUFFIXES else "json"
    return parse_file_options(path.read_text(encoding="utf-8"), fmt=fmt)
