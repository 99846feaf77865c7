"""Connection behaviour options: redirects, pooling, authentication, and request identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from VfsKit.FileOptions.base import BooleanFileOption, IntegerFileOption, JsonValue, StringFileOption
from VfsKit.FileOptions.registry import file_option
from VfsKit.FileOptions.validators import require_charset

__all__ = [
    "HttpFollowRedirect",
    "HttpKeepAlive",
    "HttpMaxConnectionsPerHost",
    "HttpMaxTotalConnections",
    "HttpPreemptiveAuthentication",
    "HttpUrlCharset",
    "HttpUserAgent",
]


@file_option
@dataclass(frozen=True, eq=False)
class HttpFollowRedirect(BooleanFileOption):
    """Whether redirects are followed."""

    NAME = "http:followRedirect"

    def _apply(self, context: Any) -> None:
        context.set_follow_redirect(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpKeepAlive(BooleanFileOption):
    NAME = "http:keepAlive"

    def _apply(self, context: Any) -> None:
        context.set_keep_alive(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpMaxConnectionsPerHost(IntegerFileOption):
    """Upper bound of pooled connections to a single host."""

    NAME = "http:maxConnectionsPerHost"
    MINIMUM = 1

    def _apply(self, context: Any) -> None:
        context.set_max_connections_per_host(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpMaxTotalConnections(IntegerFileOption):
    """Upper bound of pooled connections overall."""

    NAME = "http:maxTotalConnections"
    MINIMUM = 1

    def _apply(self, context: Any) -> None:
        context.set_max_total_connections(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpPreemptiveAuthentication(BooleanFileOption):
    NAME = "http:preemptiveAuthentication"

    def _apply(self, context: Any) -> None:
        context.set_preemptive_authentication(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpUrlCharset(StringFileOption):
    """Charset used to encode request URLs.

    The name must be known to :func:`codecs.lookup`; it is kept exactly as
    given (``"utf8"`` stays ``"utf8"``) so the JSON form round-trips.
    """

    NAME = "http:urlCharset"

    def __post_init__(self) -> None:
        require_charset(self.value, self.NAME)

    @classmethod
    def from_json(cls, value: JsonValue) -> "HttpUrlCharset":
        return cls(require_charset(value, cls.NAME))

    def _apply(self, context: Any) -> None:
        context.set_url_charset(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpUserAgent(StringFileOption):
    """Value of the ``User-Agent`` request header."""

    NAME = "http:userAgent"

    def _apply(self, context: Any) -> None:
        context.set_user_agent(self.value)
