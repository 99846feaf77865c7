"""HTTP file options.

Importing this package registers every ``http:*`` option with the resolver
registry, so :func:`VfsKit.FileOptions.resolve` can build them by name::

    from VfsKit.FileOptions import parse_file_options
    from VfsKit.HttpOptions import HttpFileSystemOptions

    options = parse_file_options('{"http:connectionTimeout": "PT30S"}')
    context = HttpFileSystemOptions()
    options.apply(context)
    client = context.create_client()
"""

from __future__ import annotations

from .connection import (
    HttpFollowRedirect,
    HttpKeepAlive,
    HttpMaxConnectionsPerHost,
    HttpMaxTotalConnections,
    HttpPreemptiveAuthentication,
    HttpUrlCharset,
    HttpUserAgent,
)
from .context import (
    DEFAULT_TIMEOUT_SECONDS,
    PROXY_SCHEMES,
    ClientCookie,
    HttpFileSystemOptions,
    ProxyCredentials,
    TlsVersion,
)
from .cookies import CookieAttribute, CookieSource, HttpCookies
from .keystore import HttpKeyStoreFile, HttpKeyStoreType
from .proxy import HttpProxyAuthenticator, HttpProxyHost, HttpProxyPort, HttpProxyScheme
from .timeouts import HttpConnectionTimeout, HttpSocketTimeout
from .tls import HttpHostnameVerification, HttpTlsVersions

__all__ = [
    "ClientCookie",
    "CookieAttribute",
    "CookieSource",
    "DEFAULT_TIMEOUT_SECONDS",
    "HttpConnectionTimeout",
    "HttpCookies",
    "HttpFileSystemOptions",
    "HttpFollowRedirect",
    "HttpHostnameVerification",
    "HttpKeepAlive",
    "HttpKeyStoreFile",
    "HttpKeyStoreType",
    "HttpMaxConnectionsPerHost",
    "HttpMaxTotalConnections",
    "HttpPreemptiveAuthentication",
    "HttpProxyAuthenticator",
    "HttpProxyHost",
    "HttpProxyPort",
    "HttpProxyScheme",
    "HttpSocketTimeout",
    "HttpTlsVersions",
    "HttpUrlCharset",
    "HttpUserAgent",
    "PROXY_SCHEMES",
    "ProxyCredentials",
    "TlsVersion",
]
