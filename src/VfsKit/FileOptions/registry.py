"""Resolver registry mapping file option names to JSON factories.

Option kinds contribute themselves in two ways:

- in-tree options decorate their class with :func:`file_option`, which records
  ``cls.NAME -> cls.from_json`` when the defining module is imported;
- other distributions publish entry points in the ``vfskit.file_options`` group
  (configurable through :class:`~VfsKit.FileOptions.settings.FileOptionSettings`).
  An entry point may reference a module (importing it runs its decorators), an
  option class exposing ``NAME`` and ``from_json``, or a bare factory callable
  registered under the entry-point name.

Discovery runs once per interpreter under a lock; afterwards lookups are plain
dictionary reads and safe to perform concurrently.
"""

from __future__ import annotations

import logging
import threading
import types
from collections import OrderedDict
from importlib import metadata
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Tuple, TypeVar

from .base import FileOption, JsonValue
from .errors import UnknownOptionError
from .settings import get_settings

__all__ = [
    "OptionResolver",
    "file_option",
    "register_resolver",
    "unregister_resolver",
    "ensure_resolvers_loaded",
    "get_resolver_registry",
    "list_registered_resolvers",
    "get_registered_resolver_meta",
    "resolve",
    "resolve_all",
]

LOGGER = logging.getLogger(__name__)


class OptionResolver(Protocol):
    """Factory turning the JSON value of one option kind into a file option."""

    def __call__(self, value: JsonValue) -> FileOption:  # pragma: no cover - runtime only
        """Construct and validate the option."""


T = TypeVar("T", bound=type)

# Reentrant: modules loaded from entry points register through @file_option.
_RESOLVERS_LOCK = threading.RLock()
_RESOLVERS_INITIALIZED = False
_RESOLVER_REGISTRY: Dict[str, OptionResolver] = {}
_RESOLVER_ENTRY_META: Dict[str, Dict[str, str]] = {}
_ENTRY_POINT_NAMES: set[str] = set()


def _describe_resolver(obj: object) -> str:
    target = getattr(obj, "__self__", obj)
    if isinstance(target, type):
        return f"{target.__module__}.{target.__qualname__}"
    module = getattr(obj, "__module__", obj.__class__.__module__)
    name = getattr(obj, "__qualname__", obj.__class__.__name__)
    return f"{module}.{name}"


def _detect_entry_version(entry: Any) -> str:
    dist = getattr(entry, "dist", None)
    if dist is not None:
        version = getattr(dist, "version", None)
        if version:
            return version
    module_name = getattr(entry, "module", "")
    root = module_name.split(".")[0] if module_name else module_name
    if root:
        try:
            return metadata.version(root)
        except metadata.PackageNotFoundError:  # pragma: no cover - optional plugin
            return "unknown"
    return "unknown"


def _store(name: str, factory: OptionResolver, *, version: str) -> None:
    previous = _RESOLVER_REGISTRY.get(name)
    if previous is not None and previous != factory:
        LOGGER.warning(
            "file option resolver replaced",
            extra={"stage": "init", "option": name, "plugin": _describe_resolver(factory)},
        )
    _RESOLVER_REGISTRY[name] = factory
    _RESOLVER_ENTRY_META[name] = {"qualified": _describe_resolver(factory), "version": version}


def register_resolver(name: str, factory: OptionResolver) -> None:
    """Register ``factory`` under ``name``.

    The registry does not deduplicate: a later registration for the same name
    replaces the earlier one (a warning is logged).
    """

    if not name:
        raise ValueError("File option resolver name must not be empty")
    if not callable(factory):
        raise TypeError(f"File option resolver for [{name}] must be callable")
    with _RESOLVERS_LOCK:
        _store(name, factory, version="local")


def unregister_resolver(name: str) -> None:
    """Remove the resolver registered under ``name``.

    Raises:
        KeyError: If no resolver is registered under ``name``.
    """

    with _RESOLVERS_LOCK:
        del _RESOLVER_REGISTRY[name]
        _RESOLVER_ENTRY_META.pop(name, None)
        _ENTRY_POINT_NAMES.discard(name)


def file_option(cls: T) -> T:
    """Class decorator registering ``cls.from_json`` under ``cls.NAME``.

    Example:
        @file_option
        @dataclass(frozen=True, eq=False)
        class HttpUserAgent(StringFileOption):
            NAME = "http:userAgent"
    """

    name = getattr(cls, "NAME", "")
    if not name:
        raise TypeError(f"{cls.__qualname__} must declare a non-empty NAME")
    register_resolver(name, cls.from_json)  # type: ignore[attr-defined]
    return cls


def _as_resolver(candidate: Any, entry_name: str) -> Optional[Tuple[str, OptionResolver]]:
    if isinstance(candidate, types.ModuleType):
        # Importing the module already ran its @file_option decorators.
        return None
    if isinstance(candidate, type):
        name = getattr(candidate, "NAME", "") or entry_name
        factory = getattr(candidate, "from_json", None)
        if not callable(factory):
            raise TypeError("file option plugin class must implement from_json")
        return name, factory
    if callable(candidate):
        return entry_name, candidate
    raise TypeError("file option plugin must be a module, an option class, or a callable")


def _load_entry_points_locked(group: str, *, logger: logging.Logger) -> None:
    """Populate the registry with resolvers discovered via entry points."""

    try:
        entry_points: Iterable[Any] = metadata.entry_points(group=group)
    except Exception as exc:  # pragma: no cover - broken metadata backend
        logger.warning(
            "file option plugin discovery failed",
            extra={"stage": "init", "error": str(exc)},
        )
        return

    for entry in entry_points:
        try:
            candidate = entry.load()
            resolved = _as_resolver(candidate, entry.name)
            if resolved is not None:
                name, factory = resolved
                _store(name, factory, version=_detect_entry_version(entry))
                _ENTRY_POINT_NAMES.add(name)
            logger.info(
                "file option plugin registered",
                extra={"stage": "init", "plugin": entry.name},
            )
        except Exception as exc:  # plugin failures are unpredictable
            logger.warning(
                "file option plugin failed",
                extra={"stage": "init", "plugin": entry.name, "error": str(exc)},
            )


def ensure_resolvers_loaded(
    *,
    logger: Optional[logging.Logger] = None,
    reload: bool = False,
) -> Dict[str, OptionResolver]:
    """Load entry-point resolvers exactly once in a thread-safe manner."""

    global _RESOLVERS_INITIALIZED

    if _RESOLVERS_INITIALIZED and not reload:
        return _RESOLVER_REGISTRY

    log = logger or LOGGER
    settings = get_settings()
    with _RESOLVERS_LOCK:
        if reload:
            for name in list(_ENTRY_POINT_NAMES):
                _RESOLVER_REGISTRY.pop(name, None)
                _RESOLVER_ENTRY_META.pop(name, None)
            _ENTRY_POINT_NAMES.clear()
            _RESOLVERS_INITIALIZED = False

        if not _RESOLVERS_INITIALIZED:
            if settings.load_entry_points:
                _load_entry_points_locked(settings.entry_point_group, logger=log)
            _RESOLVERS_INITIALIZED = True

        return _RESOLVER_REGISTRY


def get_resolver_registry(*, logger: Optional[logging.Logger] = None) -> Mapping[str, OptionResolver]:
    """Return a read-only view of the resolver registry, loading plugins once."""

    return types.MappingProxyType(ensure_resolvers_loaded(logger=logger))


def list_registered_resolvers() -> "OrderedDict[str, str]":
    """Return mapping of option names to qualified resolver identifiers."""

    registry = ensure_resolvers_loaded()
    items = {name: _describe_resolver(factory) for name, factory in registry.items()}
    return OrderedDict(sorted(items.items()))


def get_registered_resolver_meta() -> Dict[str, Dict[str, str]]:
    """Return metadata captured for registered resolvers."""

    ensure_resolvers_loaded()
    return {name: dict(meta) for name, meta in _RESOLVER_ENTRY_META.items()}


def resolve(name: str, value: JsonValue) -> FileOption:
    """Construct the file option registered under ``name`` from ``value``.

    Raises:
        UnknownOptionError: If no resolver has been contributed for ``name``.
        OptionValueError: Propagated from the option's own validation.
    """

    factory = ensure_resolvers_loaded().get(name)
    if factory is None:
        raise UnknownOptionError(f"FileOption [{name}] is not supported.", option_name=name)
    return factory(value)


def resolve_all(values: Mapping[str, JsonValue]) -> Tuple[FileOption, ...]:
    """Resolve every ``name: value`` entry of ``values`` in iteration order."""

    return tuple(resolve(name, value) for name, value in values.items())
