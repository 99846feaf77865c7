"""TLS related options: protocol versions and hostname verification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union

from VfsKit.FileOptions.base import AbstractFileOption, BooleanFileOption, JsonValue
from VfsKit.FileOptions.registry import file_option
from VfsKit.FileOptions.validators import require_enum_list

from .context import TlsVersion

__all__ = ["HttpTlsVersions", "HttpHostnameVerification"]


@file_option
@dataclass(frozen=True, eq=False)
class HttpTlsVersions(AbstractFileOption):
    """TLS versions the connector may negotiate.

    JSON input is an array of member names (``["V_1_2", "V_1_3"]``); the JSON
    output is the comma-joined string ``"V_1_2,V_1_3"`` because consumers of the
    serialised form read it as one string.
    """

    NAME = "http:tlsVersions"

    values: Tuple[Union[str, TlsVersion], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", require_enum_list(self.values, self.NAME, TlsVersion))

    @classmethod
    def from_json(cls, value: JsonValue) -> "HttpTlsVersions":
        return cls(require_enum_list(value, cls.NAME, TlsVersion))

    def _joined(self) -> str:
        return ",".join(version.name for version in self.values)

    def get_value(self) -> str:
        return self._joined()

    def _apply(self, context: Any) -> None:
        context.set_tls_versions(self._joined())


@file_option
@dataclass(frozen=True, eq=False)
class HttpHostnameVerification(BooleanFileOption):
    """Whether the server certificate host name is verified."""

    NAME = "http:hostnameVerification"

    def _apply(self, context: Any) -> None:
        context.set_hostname_verification(self.value)
