# === NAVMAP v1 ===
# {
#   "module": "VfsKit.FileOptions.base",
#   "purpose": "File option contract and shared scalar option kinds",
#   "sections": [
#     {"id": "types", "name": "JSON & protocol types", "anchor": "TYP", "kind": "api"},
#     {"id": "abstract", "name": "AbstractFileOption", "anchor": "ABS", "kind": "class"},
#     {"id": "scalars", "name": "Scalar option kinds", "anchor": "SCA", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""File option contract.

A file option is an immutable, named unit of connector configuration.  Every
option kind:

- declares a stable ``NAME`` used as its JSON key and registry lookup key,
- is built either from native values (``__init__``) or from JSON
  (:meth:`AbstractFileOption.from_json`), validating eagerly in both cases,
- projects itself back to JSON with :meth:`AbstractFileOption.get_value`,
  eliding absent fields instead of emitting ``null``,
- writes itself onto an options context through exactly one setter in
  :meth:`AbstractFileOption.apply`.

Equality and hashing are structural over ``(name, get_value())``.  The scalar
kinds at the bottom of this module carry the validation shared by most HTTP
parameters so concrete options only declare their name, bounds, and setter.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, ClassVar, Dict, List, Optional, Protocol, Union, runtime_checkable

from .errors import ApplyError, FileOptionError
from .logging_utils import mask_sensitive_data
from .validators import (
    format_duration,
    require_boolean,
    require_duration,
    require_integer,
    require_string,
)

__all__ = [
    "JsonValue",
    "FileOption",
    "AbstractFileOption",
    "DurationFileOption",
    "BooleanFileOption",
    "IntegerFileOption",
    "StringFileOption",
]

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class FileOption(Protocol):
    """Protocol describing option values produced by registry resolvers."""

    NAME: ClassVar[str]

    @property
    def name(self) -> str:  # pragma: no cover - protocol only
        """Declared option name."""

    def get_value(self) -> JsonValue:  # pragma: no cover - protocol only
        """Return the JSON projection of the option value."""

    def apply(self, context: Any) -> None:  # pragma: no cover - protocol only
        """Write the option value onto ``context``."""


def _canonical_json(value: JsonValue) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class AbstractFileOption:
    """Shared behaviour for file options: naming, equality, diagnostics, apply."""

    __slots__ = ()

    NAME: ClassVar[str] = ""

    @property
    def name(self) -> str:
        return self.NAME

    def get_name(self) -> str:
        return self.NAME

    @classmethod
    def from_json(cls, value: JsonValue) -> "AbstractFileOption":
        """Construct a validated instance from its JSON representation."""

        raise NotImplementedError

    def get_value(self) -> JsonValue:
        """Return the JSON representation that :meth:`from_json` accepts back."""

        raise NotImplementedError

    def _apply(self, context: Any) -> None:
        raise NotImplementedError

    def apply(self, context: Any) -> None:
        """Write this option onto ``context``; repeated calls overwrite.

        Raises:
            TypeError: If ``context`` is ``None``.
            ApplyError: If the context setter rejects the value.
        """
        if context is None:
            raise TypeError(f"Options context for [{self.NAME}] must not be None")
        try:
            self._apply(context)
        except FileOptionError:
            raise
        except (TypeError, ValueError) as exc:
            raise ApplyError(
                f"FileOption [{self.NAME}] could not be applied: {exc}",
                option_name=self.NAME,
            ) from exc
        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug(
                "file option applied",
                extra={
                    "stage": "apply",
                    "option": self.NAME,
                    "value": mask_sensitive_data(self.get_value()),
                },
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractFileOption):
            return NotImplemented
        return self.name == other.name and _canonical_json(self.get_value()) == _canonical_json(
            other.get_value()
        )

    def __hash__(self) -> int:
        return hash((self.name, _canonical_json(self.get_value())))

    def __str__(self) -> str:
        return json.dumps(
            {self.name: self.get_value()}, separators=(",", ":"), ensure_ascii=False
        )


@dataclass(frozen=True, eq=False)
class DurationFileOption(AbstractFileOption):
    """Option whose payload is a single non-negative duration (``"PT30S"``)."""

    value: timedelta

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", require_duration(self.value, self.NAME))

    @classmethod
    def from_json(cls, value: JsonValue) -> "DurationFileOption":
        return cls(require_duration(value, cls.NAME))

    def get_value(self) -> str:
        return format_duration(self.value)


@dataclass(frozen=True, eq=False)
class BooleanFileOption(AbstractFileOption):
    """Option whose payload is a JSON boolean."""

    value: bool

    def __post_init__(self) -> None:
        require_boolean(self.value, self.NAME)

    @classmethod
    def from_json(cls, value: JsonValue) -> "BooleanFileOption":
        return cls(require_boolean(value, cls.NAME))

    def get_value(self) -> bool:
        return self.value


@dataclass(frozen=True, eq=False)
class IntegerFileOption(AbstractFileOption):
    """Option whose payload is an integer within ``MINIMUM``..``MAXIMUM``."""

    MINIMUM: ClassVar[Optional[int]] = None
    MAXIMUM: ClassVar[Optional[int]] = None

    value: int

    def __post_init__(self) -> None:
        require_integer(self.value, self.NAME, minimum=self.MINIMUM, maximum=self.MAXIMUM)

    @classmethod
    def from_json(cls, value: JsonValue) -> "IntegerFileOption":
        return cls(require_integer(value, cls.NAME, minimum=cls.MINIMUM, maximum=cls.MAXIMUM))

    def get_value(self) -> int:
        return self.value


@dataclass(frozen=True, eq=False)
class StringFileOption(AbstractFileOption):
    """Option whose payload is a string; ``ALLOW_BLANK`` controls blank input."""

    ALLOW_BLANK: ClassVar[bool] = True

    value: str

    def __post_init__(self) -> None:
        require_string(self.value, self.NAME, allow_blank=self.ALLOW_BLANK)

    @classmethod
    def from_json(cls, value: JsonValue) -> "StringFileOption":
        return cls(require_string(value, cls.NAME, allow_blank=cls.ALLOW_BLANK))

    def get_value(self) -> str:
        return self.value
