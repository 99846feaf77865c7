# === NAVMAP v1 ===
# {
#   "module": "tests.file_options.test_registry",
#   "purpose": "Resolver registry registration, lookup, and entry-point discovery tests.",
#   "sections": [
#     {"id": "helpers", "name": "Helpers", "anchor": "HLP", "kind": "helpers"},
#     {"id": "tests", "name": "Test Cases", "anchor": "TST", "kind": "tests"}
#   ]
# }
# === /NAVMAP ===

"""Resolver registry regression tests.

Exercises manual registration/unregistration, lookups of built-in and unknown
option names, entry-point discovery with fake entry points, and concurrent
registration so that dynamically contributed option kinds behave predictably.
"""

from __future__ import annotations

import threading
import types
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List

import pytest

import VfsKit.HttpOptions  # noqa: F401  (registers the http:* options)
from VfsKit.FileOptions import (
    InvalidValueError,
    MissingInputError,
    StringFileOption,
    UnknownOptionError,
    reset_settings,
)
from VfsKit.FileOptions import registry as registry_mod
from VfsKit.HttpOptions import HttpConnectionTimeout, HttpTlsVersions, HttpUserAgent

HTTP_OPTION_NAMES = {
    "http:connectionTimeout",
    "http:cookies",
    "http:followRedirect",
    "http:hostnameVerification",
    "http:keepAlive",
    "http:keyStoreFileUri",
    "http:keyStoreType",
    "http:maxConnectionsPerHost",
    "http:maxTotalConnections",
    "http:preemptiveAuthentication",
    "http:proxyAuthenticator",
    "http:proxyHost",
    "http:proxyPort",
    "http:proxyScheme",
    "http:socketTimeout",
    "http:tlsVersions",
    "http:urlCharset",
    "http:userAgent",
}


@dataclass(frozen=True, eq=False)
class _PluginOption(StringFileOption):
    NAME = "plugin:greeting"

    def _apply(self, context: Any) -> None:
        context.greeting = self.value


def _entry(name: str, target: Any, *, version: str = "1.2.3") -> types.SimpleNamespace:
    return types.SimpleNamespace(
        name=name,
        module="fake_vfskit_plugin",
        dist=types.SimpleNamespace(version=version),
        load=lambda: target,
    )


def _broken_entry(name: str) -> types.SimpleNamespace:
    def _load() -> Any:
        raise ImportError("plugin dependency missing")

    return types.SimpleNamespace(name=name, module="broken", dist=None, load=_load)


@contextmanager
def _fake_entry_points(
    monkeypatch: pytest.MonkeyPatch, entries: List[types.SimpleNamespace]
) -> Iterator[None]:
    """Serve ``entries`` from entry-point discovery, then reload the real ones."""

    seen_groups: List[str] = []

    def fake_entry_points(*, group: str):
        seen_groups.append(group)
        return list(entries)

    original = registry_mod.metadata.entry_points
    monkeypatch.setattr(registry_mod.metadata, "entry_points", fake_entry_points)
    try:
        registry_mod.ensure_resolvers_loaded(reload=True)
        assert seen_groups == ["vfskit.file_options"]
        yield
    finally:
        monkeypatch.setattr(registry_mod.metadata, "entry_points", original)
        registry_mod.ensure_resolvers_loaded(reload=True)


def test_builtin_http_options_are_registered():
    registry = registry_mod.get_resolver_registry()

    assert HTTP_OPTION_NAMES <= set(registry)


def test_registry_view_is_read_only():
    registry = registry_mod.get_resolver_registry()

    with pytest.raises(TypeError):
        registry["http:userAgent"] = HttpUserAgent.from_json  # type: ignore[index]


def test_resolve_matches_direct_construction():
    resolved = registry_mod.resolve("http:connectionTimeout", "PT0.003S")

    assert resolved == HttpConnectionTimeout.from_json("PT0.003S")
    assert isinstance(resolved, HttpConnectionTimeout)
    assert registry_mod.resolve("http:tlsVersions", ["V_1_2"]) == HttpTlsVersions(("V_1_2",))


def test_resolve_unknown_name_raises():
    with pytest.raises(UnknownOptionError, match=r"FileOption \[http:unknown\] is not supported\."):
        registry_mod.resolve("http:unknown", "value")


def test_resolve_propagates_validation_errors():
    with pytest.raises(MissingInputError):
        registry_mod.resolve("http:socketTimeout", None)
    with pytest.raises(InvalidValueError):
        registry_mod.resolve("http:proxyPort", 0)


def test_resolve_all_keeps_order():
    options = registry_mod.resolve_all({"http:userAgent": "agent/1", "http:keepAlive": False})

    assert [option.name for option in options] == ["http:userAgent", "http:keepAlive"]


def test_register_resolver_updates_metadata():
    """Registering a resolver should update the registry and metadata tables."""

    name = "test:harness"

    def factory(value):
        return HttpUserAgent(value)

    registry_mod.register_resolver(name, factory)
    try:
        assert registry_mod.get_resolver_registry()[name] is factory
        meta = registry_mod.get_registered_resolver_meta()
        assert meta[name]["version"] == "local"
        assert meta[name]["qualified"].endswith("test_register_resolver_updates_metadata.<locals>.factory")
        assert registry_mod.list_registered_resolvers()[name] == meta[name]["qualified"]
    finally:
        registry_mod.unregister_resolver(name)

    assert name not in registry_mod.get_resolver_registry()
    assert name not in registry_mod.get_registered_resolver_meta()


def test_register_resolver_replaces_and_warns(caplog):
    name = "test:replace"
    first = HttpUserAgent.from_json

    def second(value):
        return HttpUserAgent(value.upper())

    registry_mod.register_resolver(name, first)
    try:
        with caplog.at_level("WARNING", logger="VfsKit.FileOptions.registry"):
            registry_mod.register_resolver(name, second)
        assert registry_mod.resolve(name, "agent").get_value() == "AGENT"
        assert any(record.getMessage() == "file option resolver replaced" for record in caplog.records)
    finally:
        registry_mod.unregister_resolver(name)


def test_register_resolver_rejects_bad_input():
    with pytest.raises(ValueError):
        registry_mod.register_resolver("", HttpUserAgent.from_json)
    with pytest.raises(TypeError):
        registry_mod.register_resolver("test:not-callable", "nope")  # type: ignore[arg-type]
    with pytest.raises(KeyError):
        registry_mod.unregister_resolver("test:never-registered")


def test_file_option_decorator_requires_name():
    class Nameless:
        NAME = ""

        @classmethod
        def from_json(cls, value):
            return value

    with pytest.raises(TypeError, match="non-empty NAME"):
        registry_mod.file_option(Nameless)


def test_entry_point_option_class_is_registered(monkeypatch):
    with _fake_entry_points(monkeypatch, [_entry("greeting", _PluginOption)]):
        option = registry_mod.resolve("plugin:greeting", "hello")
        assert isinstance(option, _PluginOption)
        meta = registry_mod.get_registered_resolver_meta()["plugin:greeting"]
        assert meta["version"] == "1.2.3"
        assert meta["qualified"].endswith("_PluginOption")

    with pytest.raises(UnknownOptionError):
        registry_mod.resolve("plugin:greeting", "hello")


def test_entry_point_callable_uses_entry_name(monkeypatch):
    def factory(value):
        return _PluginOption(value)

    with _fake_entry_points(monkeypatch, [_entry("plugin:callable", factory)]):
        assert registry_mod.resolve("plugin:callable", "hi").get_value() == "hi"


def test_entry_point_module_is_imported_only(monkeypatch):
    module = types.ModuleType("fake_vfskit_plugin")

    with _fake_entry_points(monkeypatch, [_entry("module", module)]):
        assert "module" not in registry_mod.get_resolver_registry()


def test_entry_point_failures_are_logged_and_skipped(monkeypatch, caplog):
    entries = [_broken_entry("broken"), _entry("greeting", _PluginOption)]

    with caplog.at_level("WARNING", logger="VfsKit.FileOptions.registry"):
        with _fake_entry_points(monkeypatch, entries):
            assert "plugin:greeting" in registry_mod.get_resolver_registry()

    failures = [r for r in caplog.records if r.getMessage() == "file option plugin failed"]
    assert failures and failures[0].plugin == "broken"


def test_entry_points_can_be_disabled(monkeypatch):
    monkeypatch.setenv("VFSKIT_LOAD_ENTRY_POINTS", "false")
    calls: List[str] = []

    def fake_entry_points(*, group: str):
        calls.append(group)
        return [_entry("greeting", _PluginOption)]

    original = registry_mod.metadata.entry_points
    monkeypatch.setattr(registry_mod.metadata, "entry_points", fake_entry_points)
    try:
        registry_mod.ensure_resolvers_loaded(reload=True)
        assert calls == []
        assert "plugin:greeting" not in registry_mod.get_resolver_registry()
        assert "http:userAgent" in registry_mod.get_resolver_registry()
    finally:
        monkeypatch.setattr(registry_mod.metadata, "entry_points", original)
        monkeypatch.delenv("VFSKIT_LOAD_ENTRY_POINTS")
        reset_settings()
        registry_mod.ensure_resolvers_loaded(reload=True)


def test_concurrent_registration_is_thread_safe():
    """Concurrent register/unregister cycles should not raise race conditions."""

    errors: list[BaseException] = []

    def worker(index: int) -> None:
        name = f"test:thread-{index}"

        def factory(value):
            return HttpUserAgent(f"{index}:{value}")

        try:
            registry_mod.register_resolver(name, factory)
            assert registry_mod.resolve(name, "x").get_value() == f"{index}:x"
        except BaseException as exc:  # pragma: no cover
            errors.append(exc)
        finally:
            try:
                registry_mod.unregister_resolver(name)
            except KeyError:
                pass

    threads = [threading.Thread(target=worker, args=(idx,)) for idx in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not errors, f"Encountered registration errors: {errors}"


def test_lookups_after_loading_skip_discovery(monkeypatch):
    registry_mod.ensure_resolvers_loaded()

    def fail(*args: Any, **kwargs: Any) -> Any:
        raise AssertionError("discovery should not run again")

    monkeypatch.setattr(registry_mod, "get_settings", fail)
    monkeypatch.setattr(registry_mod, "_load_entry_points_locked", fail)

    assert registry_mod.resolve("http:userAgent", "agent").get_value() == "agent"
    assert "http:keepAlive" in registry_mod.get_resolver_registry()
