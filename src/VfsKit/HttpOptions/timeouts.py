"""Connection and socket timeout options (ISO-8601 durations such as ``"PT30S"``)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from VfsKit.FileOptions.base import DurationFileOption
from VfsKit.FileOptions.registry import file_option

__all__ = ["HttpConnectionTimeout", "HttpSocketTimeout"]


@file_option
@dataclass(frozen=True, eq=False)
class HttpConnectionTimeout(DurationFileOption):
    """Duration of the connection timeout."""

    NAME = "http:connectionTimeout"

    def _apply(self, context: Any) -> None:
        context.set_connection_timeout(self.value)


@file_option
@dataclass(frozen=True, eq=False)
class HttpSocketTimeout(DurationFileOption):
    """Duration of the socket (read/write) timeout."""

    NAME = "http:socketTimeout"

    def _apply(self, context: Any) -> None:
        context.set_socket_timeout(self.value)
