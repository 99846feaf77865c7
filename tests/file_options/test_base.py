"""Contract tests for :class:`VfsKit.FileOptions.base.AbstractFileOption`."""

from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError, dataclass
from datetime import timedelta
from typing import Any

import pytest

from VfsKit.FileOptions import (
    AbstractFileOption,
    ApplyError,
    BooleanFileOption,
    DurationFileOption,
    FileOption,
    IntegerFileOption,
    InvalidFormatError,
    StringFileOption,
)
from VfsKit.FileOptions.logging_utils import MASK


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def set_thing(self, value: Any) -> None:
        self.calls.append(("thing", value))

    def set_strict(self, value: Any) -> None:
        raise ValueError("context refused the value")


@dataclass(frozen=True, eq=False)
class _Flag(BooleanFileOption):
    NAME = "test:flag"

    def _apply(self, context: Any) -> None:
        context.set_thing(self.value)


@dataclass(frozen=True, eq=False)
class _OtherFlag(BooleanFileOption):
    NAME = "test:otherFlag"

    def _apply(self, context: Any) -> None:
        context.set_thing(self.value)


@dataclass(frozen=True, eq=False)
class _Delay(DurationFileOption):
    NAME = "test:delay"

    def _apply(self, context: Any) -> None:
        context.set_thing(self.value)


@dataclass(frozen=True, eq=False)
class _Count(IntegerFileOption):
    NAME = "test:count"
    MINIMUM = 1

    def _apply(self, context: Any) -> None:
        context.set_strict(self.value)


@dataclass(frozen=True, eq=False)
class _Secret(StringFileOption):
    NAME = "test:secret"

    def get_value(self) -> Any:
        return {"password": self.value}

    def _apply(self, context: Any) -> None:
        context.set_thing(self.value)


def test_options_satisfy_protocol():
    assert isinstance(_Flag(True), FileOption)
    assert _Flag(True).name == _Flag(True).get_name() == "test:flag"


def test_options_are_immutable():
    option = _Flag(True)

    with pytest.raises(FrozenInstanceError):
        option.value = False  # type: ignore[misc]


def test_equality_is_structural_over_name_and_value():
    assert _Flag(True) == _Flag.from_json(True)
    assert hash(_Flag(True)) == hash(_Flag.from_json(True))
    assert _Flag(True) != _Flag(False)
    assert _Flag(True) != _OtherFlag(True)
    assert len({_Flag(True), _Flag(True), _OtherFlag(True)}) == 2
    assert _Delay(timedelta(seconds=60)) == _Delay.from_json("PT1M")


def test_str_is_compact_json():
    assert str(_Flag(False)) == '{"test:flag":false}'
    assert str(_Delay(timedelta(0))) == '{"test:delay":"PT0S"}'


def test_native_construction_validates_eagerly():
    with pytest.raises(InvalidFormatError):
        _Flag("yes")  # type: ignore[arg-type]
    with pytest.raises(InvalidFormatError):
        _Count("3")  # type: ignore[arg-type]


def test_apply_writes_through_the_setter():
    recorder = _Recorder()

    _Delay.from_json("PT2S").apply(recorder)
    _Delay.from_json("PT3S").apply(recorder)

    assert recorder.calls == [("thing", timedelta(seconds=2)), ("thing", timedelta(seconds=3))]


def test_apply_rejects_missing_context():
    with pytest.raises(TypeError):
        _Flag(True).apply(None)


def test_apply_wraps_context_rejection():
    with pytest.raises(ApplyError, match=r"\[test:count\] could not be applied") as excinfo:
        _Count(2).apply(_Recorder())

    assert excinfo.value.option_name == "test:count"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_apply_logs_masked_value(caplog):
    with caplog.at_level(logging.DEBUG, logger="VfsKit.FileOptions.base"):
        _Secret("hunter2").apply(_Recorder())

    record = next(r for r in caplog.records if r.getMessage() == "file option applied")
    assert record.option == "test:secret"
    assert record.value == {"password": MASK}


def test_abstract_methods_raise():
    with pytest.raises(NotImplementedError):
        AbstractFileOption.from_json("x")
