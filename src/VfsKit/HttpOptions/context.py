# === NAVMAP v1 ===
# {
#   "module": "VfsKit.HttpOptions.context",
#   "purpose": "Mutable HTTP options context written by file options and projected onto HTTPX",
#   "sections": [
#     {"id": "types", "name": "TLS, cookie and credential types", "anchor": "TYP", "kind": "api"},
#     {"id": "context", "name": "HttpFileSystemOptions", "anchor": "CTX", "kind": "class"},
#     {"id": "httpx", "name": "HTTPX projection", "anchor": "HTX", "kind": "helpers"}
#   ]
# }
# === /NAVMAP ===

"""HTTP options context.

:class:`HttpFileSystemOptions` is the single mutable object HTTP file options
write into.  It exposes exactly one setter per connector parameter; setters
check the type and range of what they receive and raise ``TypeError`` or
``ValueError`` otherwise (file options surface those as
:class:`~VfsKit.FileOptions.errors.ApplyError`).

The context is not synchronised.  Callers applying options to one context
from several threads must serialise those calls themselves.

:meth:`HttpFileSystemOptions.to_httpx_kwargs` projects the stored parameters
onto ``httpx.Client`` keyword arguments; building the client performs no I/O.
"""

from __future__ import annotations

import http.cookiejar
import ssl
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import certifi
import httpx

__all__ = [
    "TlsVersion",
    "ClientCookie",
    "ProxyCredentials",
    "HttpFileSystemOptions",
    "DEFAULT_TIMEOUT_SECONDS",
    "PROXY_SCHEMES",
    "utc",
]

DEFAULT_TIMEOUT_SECONDS = 5.0
PROXY_SCHEMES = ("http", "https")


class TlsVersion(Enum):
    """TLS protocol versions understood by the HTTP connector, in ascending order."""

    V_1_0 = ssl.TLSVersion.TLSv1
    V_1_1 = ssl.TLSVersion.TLSv1_1
    V_1_2 = ssl.TLSVersion.TLSv1_2
    V_1_3 = ssl.TLSVersion.TLSv1_3


@dataclass(frozen=True)
class ClientCookie:
    """Cookie handed to the HTTP client.

    ``creation`` and ``expiry`` are timezone-aware UTC datetimes.  ``attributes``
    keeps insertion order; an attribute may be present without a value.
    """

    name: str
    value: Optional[str] = None
    domain: Optional[str] = None
    path: Optional[str] = None
    http_only: bool = False
    secure: bool = False
    creation: Optional[datetime] = None
    expiry: Optional[datetime] = None
    attributes: Mapping[str, Optional[str]] = field(default_factory=dict, hash=False)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def contains_attribute(self, name: str) -> bool:
        return name in self.attributes

    def to_cookiejar(self) -> http.cookiejar.Cookie:
        """Return the :mod:`http.cookiejar` form used by ``httpx.Cookies``."""

        rest: Dict[str, Optional[str]] = dict(self.attributes)
        if self.http_only:
            rest.setdefault("HttpOnly", None)
        domain = self.domain or ""
        return http.cookiejar.Cookie(
            version=0,
            name=self.name,
            value=self.value,
            port=None,
            port_specified=False,
            domain=domain,
            domain_specified=bool(domain),
            domain_initial_dot=domain.startswith("."),
            path=self.path or "/",
            path_specified=self.path is not None,
            secure=self.secure,
            expires=int(self.expiry.timestamp()) if self.expiry is not None else None,
            discard=self.expiry is None,
            comment=None,
            comment_url=None,
            rest=rest,
        )


@dataclass(frozen=True)
class ProxyCredentials:
    """Static proxy credentials; every part is optional."""

    domain: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)


def _require_type(value: Any, expected: type, parameter: str) -> None:
    # bool is an int subclass; never accept it where a number is expected.
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise TypeError(f"{parameter} must be {expected.__name__}, got {type(value).__name__}")


def _require_positive(value: int, parameter: str) -> None:
    _require_type(value, int, parameter)
    if value < 1:
        raise ValueError(f"{parameter} must be positive, got {value}")


class HttpFileSystemOptions:
    """Mutable parameter store consumed by the HTTP transport."""

    def __init__(self) -> None:
        self._params: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"HttpFileSystemOptions({sorted(self._params)})"

    def __contains__(self, parameter: str) -> bool:
        return parameter in self._params

    def parameters(self) -> Dict[str, Any]:
        """Return a shallow copy of every parameter set so far."""

        return dict(self._params)

    # --- timeouts -------------------------------------------------------

    def set_connection_timeout(self, timeout: timedelta) -> None:
        self._set_duration("connection_timeout", timeout)

    def get_connection_timeout(self) -> Optional[timedelta]:
        return self._params.get("connection_timeout")

    def set_socket_timeout(self, timeout: timedelta) -> None:
        self._set_duration("socket_timeout", timeout)

    def get_socket_timeout(self) -> Optional[timedelta]:
        return self._params.get("socket_timeout")

    def _set_duration(self, parameter: str, timeout: timedelta) -> None:
        _require_type(timeout, timedelta, parameter)
        if timeout < timedelta(0):
            raise ValueError(f"{parameter} must not be negative")
        self._params[parameter] = timeout

    # --- cookies --------------------------------------------------------

    def set_cookies(self, cookies: Sequence[ClientCookie]) -> None:
        cookies = tuple(cookies)
        for cookie in cookies:
            _require_type(cookie, ClientCookie, "cookies")
        self._params["cookies"] = cookies

    def get_cookies(self) -> Tuple[ClientCookie, ...]:
        return self._params.get("cookies", ())

    # --- connection behaviour -------------------------------------------

    def set_follow_redirect(self, follow: bool) -> None:
        _require_type(follow, bool, "follow_redirect")
        self._params["follow_redirect"] = follow

    def get_follow_redirect(self) -> Optional[bool]:
        return self._params.get("follow_redirect")

    def set_keep_alive(self, keep_alive: bool) -> None:
        _require_type(keep_alive, bool, "keep_alive")
        self._params["keep_alive"] = keep_alive

    def get_keep_alive(self) -> Optional[bool]:
        return self._params.get("keep_alive")

    def set_max_connections_per_host(self, count: int) -> None:
        _require_positive(count, "max_connections_per_host")
        self._params["max_connections_per_host"] = count

    def get_max_connections_per_host(self) -> Optional[int]:
        return self._params.get("max_connections_per_host")

    def set_max_total_connections(self, count: int) -> None:
        _require_positive(count, "max_total_connections")
        self._params["max_total_connections"] = count

    def get_max_total_connections(self) -> Optional[int]:
        return self._params.get("max_total_connections")

    def set_preemptive_authentication(self, preemptive: bool) -> None:
        _require_type(preemptive, bool, "preemptive_authentication")
        self._params["preemptive_authentication"] = preemptive

    def get_preemptive_authentication(self) -> Optional[bool]:
        return self._params.get("preemptive_authentication")

    def set_url_charset(self, charset: str) -> None:
        _require_type(charset, str, "url_charset")
        self._params["url_charset"] = charset

    def get_url_charset(self) -> Optional[str]:
        return self._params.get("url_charset")

    def set_user_agent(self, user_agent: str) -> None:
        _require_type(user_agent, str, "user_agent")
        self._params["user_agent"] = user_agent

    def get_user_agent(self) -> Optional[str]:
        return self._params.get("user_agent")

    # --- TLS ------------------------------------------------------------

    def set_tls_versions(self, versions: str) -> None:
        """Store a comma-separated list of :class:`TlsVersion` member names.

        An empty string leaves the protocol range to the SSL defaults.
        """

        _require_type(versions, str, "tls_versions")
        tokens = [token.strip() for token in versions.split(",") if token.strip()]
        unknown = [token for token in tokens if token not in TlsVersion.__members__]
        if unknown:
            raise ValueError(f"Unsupported TLS versions: {', '.join(unknown)}")
        self._params["tls_versions"] = ",".join(tokens)

    def get_tls_versions(self) -> Optional[str]:
        return self._params.get("tls_versions")

    def set_hostname_verification(self, verify: bool) -> None:
        _require_type(verify, bool, "hostname_verification")
        self._params["hostname_verification"] = verify

    def get_hostname_verification(self) -> Optional[bool]:
        return self._params.get("hostname_verification")

    def set_key_store_file(self, key_store_file: str) -> None:
        _require_type(key_store_file, str, "key_store_file")
        if not Path(key_store_file).is_absolute():
            raise ValueError("key_store_file must be an absolute path")
        self._params["key_store_file"] = key_store_file

    def get_key_store_file(self) -> Optional[str]:
        return self._params.get("key_store_file")

    def set_key_store_type(self, key_store_type: str) -> None:
        _require_type(key_store_type, str, "key_store_type")
        self._params["key_store_type"] = key_store_type

    def get_key_store_type(self) -> Optional[str]:
        return self._params.get("key_store_type")

    # --- proxy ----------------------------------------------------------

    def set_proxy_authenticator(self, credentials: ProxyCredentials) -> None:
        _require_type(credentials, ProxyCredentials, "proxy_authenticator")
        self._params["proxy_authenticator"] = credentials

    def get_proxy_authenticator(self) -> Optional[ProxyCredentials]:
        return self._params.get("proxy_authenticator")

    def set_proxy_host(self, host: str) -> None:
        _require_type(host, str, "proxy_host")
        self._params["proxy_host"] = host

    def get_proxy_host(self) -> Optional[str]:
        return self._params.get("proxy_host")

    def set_proxy_port(self, port: int) -> None:
        _require_type(port, int, "proxy_port")
        if not 1 <= port <= 65535:
            raise ValueError(f"proxy_port must be between 1 and 65535, got {port}")
        self._params["proxy_port"] = port

    def get_proxy_port(self) -> Optional[int]:
        return self._params.get("proxy_port")

    def set_proxy_scheme(self, scheme: str) -> None:
        _require_type(scheme, str, "proxy_scheme")
        if scheme not in PROXY_SCHEMES:
            raise ValueError(f"proxy_scheme must be one of {list(PROXY_SCHEMES)}")
        self._params["proxy_scheme"] = scheme

    def get_proxy_scheme(self) -> Optional[str]:
        return self._params.get("proxy_scheme")

    # --- HTTPX projection -----------------------------------------------

    def _timeout(self) -> Optional[httpx.Timeout]:
        connect = self.get_connection_timeout()
        socket = self.get_socket_timeout()
        if connect is None and socket is None:
            return None
        read_write = socket.total_seconds() if socket is not None else DEFAULT_TIMEOUT_SECONDS
        return httpx.Timeout(
            DEFAULT_TIMEOUT_SECONDS,
            connect=connect.total_seconds() if connect is not None else DEFAULT_TIMEOUT_SECONDS,
            read=read_write,
            write=read_write,
        )

    def _limits(self) -> Optional[httpx.Limits]:
        total = self.get_max_total_connections()
        keep_alive = self.get_keep_alive()
        if total is None and keep_alive is None:
            return None
        kwargs: Dict[str, Any] = {}
        if total is not None:
            kwargs["max_connections"] = total
        if keep_alive is False:
            kwargs["max_keepalive_connections"] = 0
        return httpx.Limits(**kwargs)

    def _ssl_context(self) -> Optional[ssl.SSLContext]:
        versions = self.get_tls_versions()
        verify_hostname = self.get_hostname_verification()
        if not versions and verify_hostname is None:
            return None
        context = ssl.create_default_context(cafile=certifi.where())
        if versions:
            members = [TlsVersion[token] for token in versions.split(",")]
            context.minimum_version = min(members, key=lambda m: m.value).value
            context.maximum_version = max(members, key=lambda m: m.value).value
        if verify_hostname is False:
            context.check_hostname = False
        return context

    def _proxy(self) -> Optional[httpx.Proxy]:
        host = self.get_proxy_host()
        if not host:
            return None
        scheme = self.get_proxy_scheme() or "http"
        port = self.get_proxy_port()
        url = f"{scheme}://{host}:{port}" if port is not None else f"{scheme}://{host}"
        credentials = self.get_proxy_authenticator()
        if credentials is not None and credentials.username is not None:
            return httpx.Proxy(url, auth=(credentials.username, credentials.password or ""))
        return httpx.Proxy(url)

    def _cookies(self) -> Optional[httpx.Cookies]:
        cookies = self.get_cookies()
        if not cookies:
            return None
        jar = httpx.Cookies()
        for cookie in cookies:
            jar.jar.set_cookie(cookie.to_cookiejar())
        return jar

    def to_httpx_kwargs(self) -> Dict[str, Any]:
        """Return ``httpx.Client`` keyword arguments for the stored parameters.

        Only parameters that were set contribute a keyword.  Parameters with no
        HTTPX counterpart (per-host connection limit, preemptive authentication,
        URL charset, key store) stay available through their getters.
        """

        kwargs: Dict[str, Any] = {}
        timeout = self._timeout()
        if timeout is not None:
            kwargs["timeout"] = timeout
        limits = self._limits()
        if limits is not None:
            kwargs["limits"] = limits
        follow = self.get_follow_redirect()
        if follow is not None:
            kwargs["follow_redirects"] = follow
        user_agent = self.get_user_agent()
        if user_agent is not None:
            kwargs["headers"] = {"User-Agent": user_agent}
        cookies = self._cookies()
        if cookies is not None:
            kwargs["cookies"] = cookies
        proxy = self._proxy()
        if proxy is not None:
            kwargs["proxy"] = proxy
        ssl_context = self._ssl_context()
        if ssl_context is not None:
            kwargs["verify"] = ssl_context
        return kwargs

    def create_client(self, **overrides: Any) -> httpx.Client:
        """Build an ``httpx.Client`` from the stored parameters."""

        kwargs = self.to_httpx_kwargs()
        kwargs.update(overrides)
        return httpx.Client(**kwargs)


def utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime (aware values are converted)."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
