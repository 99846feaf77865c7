# === NAVMAP v1 ===
# {
#   "module": "VfsKit.FileOptions.validators",
#   "purpose": "Shared parsing and coercion helpers used by file option constructors",
#   "sections": [
#     {"id": "messages", "name": "Message helpers", "anchor": "MSG", "kind": "helpers"},
#     {"id": "scalars", "name": "Scalar validators", "anchor": "SCA", "kind": "api"},
#     {"id": "durations", "name": "Duration parsing", "anchor": "DUR", "kind": "api"},
#     {"id": "enums", "name": "Closed-set validators", "anchor": "ENU", "kind": "api"},
#     {"id": "paths", "name": "Path and URI coercion", "anchor": "PTH", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Validation helpers shared by every file option.

Each helper accepts a raw (JSON-derived or native) value plus the declared
option name and either returns the normalised value or raises one of the
:mod:`VfsKit.FileOptions.errors` classes.  Messages always start with
``FileOption value of [<name>]`` so failures can be attributed without a
traceback.
"""

from __future__ import annotations

import codecs
import os
import re
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar
from urllib.parse import urlsplit
from urllib.request import url2pathname

from .errors import InvalidFormatError, InvalidValueError, MissingInputError

__all__ = [
    "option_message",
    "require_present",
    "require_boolean",
    "require_string",
    "require_optional_string",
    "require_integer",
    "require_duration",
    "format_duration",
    "require_choice",
    "require_enum",
    "require_enum_list",
    "require_charset",
    "require_absolute_path",
    "require_path_via_uri",
    "path_to_uri",
]

E = TypeVar("E", bound=Enum)

# ISO-8601 duration grammar (days plus time components, optional signs), limited
# to microsecond precision so values survive a round trip through timedelta.
_DURATION_PATTERN = re.compile(
    r"^(?P<sign>[-+]?)P"
    r"(?:(?P<days>[-+]?[0-9]+)D)?"
    r"(?P<time>T"
    r"(?:(?P<hours>[-+]?[0-9]+)H)?"
    r"(?:(?P<minutes>[-+]?[0-9]+)M)?"
    r"(?:(?P<seconds>[-+]?[0-9]+)(?:[.,](?P<fraction>[0-9]{0,6}))?S)?"
    r")?$",
    re.IGNORECASE,
)


def option_message(name: str, requirement: str) -> str:
    """Return the canonical failure message for ``name``."""

    return f"FileOption value of [{name}] {requirement}"


def _either(members: Iterable[str]) -> str:
    return "must be either [{}].".format(", ".join(members))


def require_present(value: Any, name: str) -> Any:
    """Reject ``None`` with :class:`MissingInputError`."""

    if value is None:
        raise MissingInputError(option_message(name, "is required."), option_name=name)
    return value


def require_boolean(value: Any, name: str) -> bool:
    require_present(value, name)
    if not isinstance(value, bool):
        raise InvalidFormatError(option_message(name, "must be boolean."), option_name=name)
    return value


def require_string(value: Any, name: str, *, allow_blank: bool = True) -> str:
    """Return ``value`` when it is a string, optionally rejecting blank strings."""

    require_present(value, name)
    if not isinstance(value, str):
        raise InvalidFormatError(option_message(name, "must be string."), option_name=name)
    if not allow_blank and not value.strip():
        raise InvalidValueError(option_message(name, "must not be blank."), option_name=name)
    return value


def require_optional_string(value: Any, name: str, key: str) -> Optional[str]:
    """Return ``value`` when it is ``None`` or a string; ``key`` names the field."""

    if value is None or isinstance(value, str):
        return value
    raise InvalidFormatError(
        option_message(name, f"element [{key}] must be string."), option_name=name
    )


def require_integer(
    value: Any,
    name: str,
    *,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """Return ``value`` when it is an integer within the inclusive bounds."""

    require_present(value, name)
    # bool is an int subclass but never a valid count or port.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFormatError(option_message(name, "must be integer."), option_name=name)
    if minimum is not None and maximum is not None:
        if not minimum <= value <= maximum:
            raise InvalidValueError(
                option_message(name, f"must be between {minimum} and {maximum}."),
                option_name=name,
            )
    elif minimum is not None and value < minimum:
        raise InvalidValueError(
            option_message(name, f"must be greater than or equal to {minimum}."),
            option_name=name,
        )
    elif maximum is not None and value > maximum:
        raise InvalidValueError(
            option_message(name, f"must be less than or equal to {maximum}."),
            option_name=name,
        )
    return value


def _parse_duration(text: str) -> Optional[timedelta]:
    match = _DURATION_PATTERN.match(text)
    if match is None:
        return None
    parts = match.groupdict()
    if (parts["time"] or "").upper() == "T" or (parts["days"] is None and parts["time"] is None):
        return None

    def _number(key: str) -> int:
        raw = parts[key]
        return int(raw) if raw else 0

    seconds_total = ((_number("days") * 24 + _number("hours")) * 60 + _number("minutes")) * 60
    seconds_total += _number("seconds")
    micros = seconds_total * 1_000_000
    fraction = parts["fraction"]
    if fraction:
        fraction_micros = int(fraction.ljust(6, "0"))
        if (parts["seconds"] or "").startswith("-"):
            fraction_micros = -fraction_micros
        micros += fraction_micros
    if parts["sign"] == "-":
        micros = -micros
    try:
        return timedelta(microseconds=micros)
    except OverflowError:
        return None


def require_duration(value: Any, name: str) -> timedelta:
    """Parse an ISO-8601 duration string (or accept a ``timedelta``).

    Args:
        value: Duration text such as ``"PT30S"`` or an existing ``timedelta``.
        name: Declared option name used in failure messages.

    Returns:
        Non-negative ``timedelta``.

    Raises:
        MissingInputError: If ``value`` is ``None``.
        InvalidFormatError: If ``value`` is neither a string nor a ``timedelta``.
        InvalidValueError: If the text does not parse or the duration is negative.

    Examples:
        >>> require_duration("PT0.003S", "http:connectionTimeout")
        datetime.timedelta(microseconds=3000)
    """

    require_present(value, name)
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, str):
        parsed = _parse_duration(value.strip())
        if parsed is None:
            raise InvalidValueError(option_message(name, "must be duration."), option_name=name)
        duration = parsed
    else:
        raise InvalidFormatError(option_message(name, "must be duration."), option_name=name)
    if duration < timedelta(0):
        raise InvalidValueError(
            option_message(name, "must be non-negative duration."), option_name=name
        )
    return duration


def format_duration(duration: timedelta) -> str:
    """Format a non-negative ``timedelta`` in canonical ISO-8601 form.

    Days are folded into hours and zero components are dropped, so
    ``timedelta(milliseconds=3)`` becomes ``"PT0.003S"`` and ``timedelta(0)``
    becomes ``"PT0S"``.
    """

    total_micros = (duration.days * 86_400 + duration.seconds) * 1_000_000 + duration.microseconds
    if total_micros == 0:
        return "PT0S"
    whole_seconds, micros = divmod(total_micros, 1_000_000)
    hours, remainder = divmod(whole_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = "PT"
    if hours:
        text += f"{hours}H"
    if minutes:
        text += f"{minutes}M"
    if seconds == 0 and micros == 0:
        return text
    text += str(seconds)
    if micros:
        text += "." + f"{micros:06d}".rstrip("0")
    return text + "S"


def require_choice(value: Any, name: str, choices: Sequence[str]) -> str:
    """Return ``value`` when it is one of ``choices`` (case-sensitive)."""

    require_present(value, name)
    if not isinstance(value, str):
        raise InvalidFormatError(option_message(name, _either(choices)), option_name=name)
    if value not in choices:
        raise InvalidValueError(option_message(name, _either(choices)), option_name=name)
    return value


def require_enum(value: Any, name: str, enum_type: Type[E]) -> E:
    """Return the member of ``enum_type`` whose name equals ``value``."""

    members = [member.name for member in enum_type]
    if isinstance(value, enum_type):
        return value
    return enum_type[require_choice(value, name, members)]


def require_enum_list(value: Any, name: str, enum_type: Type[E]) -> Tuple[E, ...]:
    """Return a tuple of members of ``enum_type`` named by the entries of ``value``.

    The legal members are listed in declaration order in every failure message.
    """

    require_present(value, name)
    members = [member.name for member in enum_type]
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise InvalidFormatError(option_message(name, _either(members)), option_name=name)
    resolved: List[E] = []
    for item in value:
        if item is None:
            raise InvalidFormatError(option_message(name, _either(members)), option_name=name)
        resolved.append(require_enum(item, name, enum_type))
    return tuple(resolved)


def require_charset(value: Any, name: str) -> str:
    """Return ``value`` when it names a codec known to Python."""

    text = require_string(value, name, allow_blank=False)
    try:
        codecs.lookup(text)
    except LookupError as exc:
        raise InvalidValueError(
            option_message(name, "must be charset name."), option_name=name
        ) from exc
    return text


def require_absolute_path(value: Any, name: str) -> Path:
    """Return ``value`` as a :class:`Path`, rejecting relative paths."""

    require_present(value, name)
    if not isinstance(value, (str, os.PathLike)):
        raise InvalidFormatError(option_message(name, "must be path."), option_name=name)
    path = Path(value)
    if not path.is_absolute():
        raise InvalidValueError(option_message(name, "must be absolute path."), option_name=name)
    return path


def require_path_via_uri(value: Any, name: str) -> Path:
    """Convert a ``file:`` URI string into an absolute local path."""

    message = option_message(
        name,
        "must be convertible to URI, and further convertible to absolute path of local file.",
    )
    require_present(value, name)
    if not isinstance(value, str):
        raise InvalidFormatError(message, option_name=name)
    parts = urlsplit(value)
    if (
        parts.scheme.lower() != "file"
        or parts.netloc not in ("", "localhost")
        or parts.query
        or parts.fragment
    ):
        raise InvalidValueError(message, option_name=name)
    path = Path(url2pathname(parts.path))
    if not parts.path or not path.is_absolute():
        raise InvalidValueError(message, option_name=name)
    return path


def path_to_uri(path: Path) -> str:
    """Return the ``file:`` URI for an absolute ``path``."""

    return path.as_uri()
