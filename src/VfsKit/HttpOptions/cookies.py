# === NAVMAP v1 ===
# {
#   "module": "VfsKit.HttpOptions.cookies",
#   "purpose": "Cookie source value objects and the http:cookies file option",
#   "sections": [
#     {"id": "attribute", "name": "CookieAttribute", "anchor": "ATT", "kind": "class"},
#     {"id": "source", "name": "CookieSource", "anchor": "SRC", "kind": "class"},
#     {"id": "option", "name": "HttpCookies", "anchor": "OPT", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Cookies to add to HTTP requests.

Each cookie is described by a JSON object; only ``name`` is required::

    [
        {
            "name": "required",
            "value": "optional",
            "domain": "optional",
            "path": "optional",
            "isOnlyHttp": false,
            "isSecure": false,
            "creationDateTime": "2000-01-01T00:00:00",
            "expiryDateTime": "2999-12-31T23:59:59",
            "attributes": [{"name": "required", "value": "optional"}]
        }
    ]

Absent keys (or ``null``) mean "no value" and are omitted again when the
cookie is serialised.  Date-times are local (no offset) and only become UTC
when exported as a :class:`~VfsKit.HttpOptions.context.ClientCookie`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from VfsKit.FileOptions.base import AbstractFileOption, JsonValue
from VfsKit.FileOptions.errors import (
    InvalidFormatError,
    InvalidValueError,
    MissingInputError,
    OptionValueError,
)
from VfsKit.FileOptions.registry import file_option
from VfsKit.FileOptions.validators import option_message, require_present

from .context import ClientCookie, utc

__all__ = ["CookieAttribute", "CookieSource", "HttpCookies", "format_local_datetime"]

_LOCAL_DATETIME_HINT = "must be local date-time such as 2007-12-03T10:15:30"


def format_local_datetime(value: datetime) -> str:
    """Format ``value`` as ``YYYY-MM-DDTHH:MM:SS[.fraction]`` without trailing zeros."""

    text = value.replace(microsecond=0).isoformat(timespec="seconds")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    return text


def _drop_nulls(data: Any) -> Any:
    # A JSON null is treated exactly like a missing key.
    if isinstance(data, Mapping):
        return {key: value for key, value in data.items() if value is not None}
    return data


class CookieAttribute(BaseModel):
    """One cookie attribute; ``value`` may be absent."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: StrictStr
    value: Optional[StrictStr] = None

    @model_validator(mode="before")
    @classmethod
    def _absent_nulls(cls, data: Any) -> Any:
        return _drop_nulls(data)


class CookieSource(BaseModel):
    """Immutable source value for one client cookie."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: StrictStr
    value: Optional[StrictStr] = None
    domain: Optional[StrictStr] = None
    path: Optional[StrictStr] = None
    http_only: Optional[StrictBool] = Field(default=None, alias="isOnlyHttp")
    secure: Optional[StrictBool] = Field(default=None, alias="isSecure")
    creation: Optional[datetime] = Field(default=None, alias="creationDateTime")
    expiry: Optional[datetime] = Field(default=None, alias="expiryDateTime")
    attributes: Optional[Tuple[CookieAttribute, ...]] = None

    @model_validator(mode="before")
    @classmethod
    def _absent_nulls(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @field_validator("creation", "expiry", mode="before")
    @classmethod
    def _local_datetime(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            if "T" not in value:
                raise PydanticCustomError("local_datetime", _LOCAL_DATETIME_HINT)
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError:
                raise PydanticCustomError("local_datetime", _LOCAL_DATETIME_HINT) from None
        else:
            raise PydanticCustomError("local_datetime_type", _LOCAL_DATETIME_HINT)
        if parsed.tzinfo is not None:
            raise PydanticCustomError("local_datetime", _LOCAL_DATETIME_HINT)
        return parsed

    @field_validator("attributes", mode="after")
    @classmethod
    def _unique_attribute_names(
        cls, value: Optional[Tuple[CookieAttribute, ...]]
    ) -> Optional[Tuple[CookieAttribute, ...]]:
        if value is None:
            return None
        seen = set()
        for attribute in value:
            if attribute.name in seen:
                raise PydanticCustomError(
                    "duplicate_attribute",
                    "Cookie attribute names must not be duplicated: [{name}]",
                    {"name": attribute.name},
                )
            seen.add(attribute.name)
        return value

    @field_serializer("creation", "expiry")
    def _serialize_local_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return format_local_datetime(value) if value is not None else None

    @classmethod
    def from_json(cls, value: JsonValue, *, option_name: str = "http:cookies") -> "CookieSource":
        """Build a cookie source from its JSON object.

        Raises:
            MissingInputError: If ``value`` or a required ``name`` is absent.
            InvalidFormatError: If an element has the wrong JSON kind.
            InvalidValueError: For malformed date-times or duplicated attribute names.
        """
        if value is None:
            raise MissingInputError("Cookie must not be null.", option_name=option_name)
        if not isinstance(value, Mapping):
            raise InvalidFormatError("Cookie must be JSON object.", option_name=option_name)
        try:
            return cls.model_validate(dict(value))
        except ValidationError as exc:
            raise _translate(exc, option_name) from exc

    def attribute_map(self) -> Dict[str, Optional[str]]:
        """Return the attributes as an ordered ``name -> value`` mapping."""

        return {attribute.name: attribute.value for attribute in self.attributes or ()}

    def to_json(self) -> Dict[str, JsonValue]:
        """Return the JSON object :meth:`from_json` accepts back; absent keys are omitted."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_cookie(self) -> ClientCookie:
        """Build the client cookie, interpreting local date-times as UTC."""

        return ClientCookie(
            name=self.name,
            value=self.value,
            domain=self.domain,
            path=self.path,
            http_only=bool(self.http_only),
            secure=bool(self.secure),
            creation=utc(self.creation) if self.creation is not None else None,
            expiry=utc(self.expiry) if self.expiry is not None else None,
            attributes=self.attribute_map(),
        )


def _translate(exc: ValidationError, option_name: str) -> OptionValueError:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"]) or "cookie"
    kind = error["type"]
    message = f"Cookie element [{location}] {error['msg']}"
    if kind == "missing":
        return MissingInputError(message, option_name=option_name)
    if kind.endswith("_type"):
        return InvalidFormatError(message, option_name=option_name)
    return InvalidValueError(message, option_name=option_name)


@file_option
@dataclass(frozen=True, eq=False)
class HttpCookies(AbstractFileOption):
    """Cookies to add to every HTTP request; duplicate cookie names are allowed."""

    NAME = "http:cookies"

    values: Tuple[CookieSource, ...]

    def __post_init__(self) -> None:
        values = self.values
        require_present(values, self.NAME)
        if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, (list, tuple)):
            raise InvalidFormatError(_list_message(), option_name=self.NAME)
        for item in values:
            if not isinstance(item, CookieSource):
                raise InvalidFormatError(_list_message(), option_name=self.NAME)
        object.__setattr__(self, "values", tuple(values))

    @classmethod
    def from_json(cls, value: JsonValue) -> "HttpCookies":
        require_present(value, cls.NAME)
        if not isinstance(value, (list, tuple)):
            raise InvalidFormatError(_list_message(), option_name=cls.NAME)
        sources: List[CookieSource] = []
        for index, item in enumerate(value):
            try:
                sources.append(CookieSource.from_json(item, option_name=cls.NAME))
            except OptionValueError as exc:
                raise type(exc)(
                    f"{_list_message()} cookies[{index}]: {exc}", option_name=cls.NAME
                ) from exc
        return cls(tuple(sources))

    @classmethod
    def of(cls, sources: Sequence[CookieSource]) -> "HttpCookies":
        return cls(tuple(sources))

    def get_value(self) -> List[Dict[str, JsonValue]]:
        return [source.to_json() for source in self.values]

    def _apply(self, context: Any) -> None:
        context.set_cookies([source.to_cookie() for source in self.values])


def _list_message() -> str:
    return option_message(HttpCookies.NAME, "must be list of cookie.")
