"""Proxy options: authenticator, host, port, and scheme."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from VfsKit.FileOptions.base import AbstractFileOption, IntegerFileOption, JsonValue, StringFileOption
from VfsKit.FileOptions.errors import InvalidFormatError
from VfsKit.FileOptions.registry import file_option
from VfsKit.FileOptions.validators import (
    option_message,
    require_choice,
    require_optional_string,
    require_present,
)

from .context import PROXY_SCHEMES, ProxyCredentials

__all__ = ["HttpProxyAuthenticator", "HttpProxyHost", "HttpProxyPort", "HttpProxyScheme"]

_CREDENTIAL_KEYS = ("id", "password", "domain")


@file_option
@dataclass(frozen=True, eq=False)
class HttpProxyAuthenticator(AbstractFileOption):
    """Static credentials for the proxy.

    ``id``, ``password`` and ``domain`` are independently optional; absent
    fields are left out of the JSON form rather than written as empty strings.
    """

    NAME = "http:proxyAuthenticator"

    id: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    domain: Optional[str] = None

    def __post_init__(self) -> None:
        for key in _CREDENTIAL_KEYS:
            require_optional_string(getattr(self, key), self.NAME, key)

    @classmethod
    def from_json(cls, value: JsonValue) -> "HttpProxyAuthenticator":
        require_present(value, cls.NAME)
        if not isinstance(value, Mapping):
            raise InvalidFormatError(
                option_message(cls.NAME, "must be convertible to JSON object."),
                option_name=cls.NAME,
            )
        return cls(**{key: value.get(key) for key in _CREDENTIAL_KEYS})

    def get_value(self) -> Dict[str, str]:
        data: Dict[str, str] = {}
        for key in _CREDENTIAL_KEYS:
            item = getattr(self, key)
            if item is not None:
                data[key] = item
        return data

    def _apply(self, context: Any) -> None:
        context.set_proxy_authenticator(
            ProxyCredentials(domain=self.domain, username=self.id, password=self.password)
        )


@file_option
@dataclass(frozen=True, eq=False)
class HttpProxyHost(StringFileOption):
    """Host name of the proxy."""

    NAME = "http:proxyHost"
    ALLOW_BLANK = False

    def _apply(self, context: Any) -> None:
        context.set_proxy_host(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpProxyPort(IntegerFileOption):
    """Port of the proxy."""

    NAME = "http:proxyPort"
    MINIMUM = 1
    MAXIMUM = 65535

    def _apply(self, context: Any) -> None:
        context.set_proxy_port(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpProxyScheme(StringFileOption):
    """Scheme used to talk to the proxy: ``http`` or ``https``."""

    NAME = "http:proxyScheme"

    def __post_init__(self) -> None:
        require_choice(self.value, self.NAME, PROXY_SCHEMES)

    @classmethod
    def from_json(cls, value: JsonValue) -> "HttpProxyScheme":
        return cls(require_choice(value, cls.NAME, PROXY_SCHEMES))

    def _apply(self, context: Any) -> None:
        context.set_proxy_scheme(self.value)
