"""Public API for VfsKit file options.

This facade exposes the option contract, the shared scalar option kinds, the
resolver registry used to build options from JSON by name, option document
loading, and the exception hierarchy raised by all of them.
"""

from __future__ import annotations

from .base import (
    AbstractFileOption,
    BooleanFileOption,
    DurationFileOption,
    FileOption,
    IntegerFileOption,
    JsonValue,
    StringFileOption,
)
from .document import FileOptions, load_file_options, parse_file_options, resolve_file_options
from .errors import (
    ApplyError,
    FileOptionError,
    InvalidFormatError,
    InvalidValueError,
    MissingInputError,
    OptionValueError,
    UnknownOptionError,
)
from .registry import (
    ensure_resolvers_loaded,
    file_option,
    get_registered_resolver_meta,
    get_resolver_registry,
    list_registered_resolvers,
    register_resolver,
    resolve,
    resolve_all,
    unregister_resolver,
)
from .settings import FileOptionSettings, get_settings, reset_settings

__all__ = [
    "AbstractFileOption",
    "ApplyError",
    "BooleanFileOption",
    "DurationFileOption",
    "FileOption",
    "FileOptionError",
    "FileOptionSettings",
    "FileOptions",
    "IntegerFileOption",
    "InvalidFormatError",
    "InvalidValueError",
    "JsonValue",
    "MissingInputError",
    "OptionValueError",
    "StringFileOption",
    "UnknownOptionError",
    "ensure_resolvers_loaded",
    "file_option",
    "get_registered_resolver_meta",
    "get_resolver_registry",
    "get_settings",
    "list_registered_resolvers",
    "load_file_options",
    "parse_file_options",
    "register_resolver",
    "reset_settings",
    "resolve",
    "resolve_all",
    "resolve_file_options",
    "unregister_resolver",
]
