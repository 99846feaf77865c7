# === NAVMAP v1 ===
# {
#   "module": "tests.conftest",
#   "purpose": "Shared pytest fixtures for suite",
#   "sections": [
#     {"id": "paths", "name": "sys.path setup", "anchor": "PTH", "kind": "setup"},
#     {"id": "fixtures", "name": "Fixtures", "anchor": "FIX", "kind": "fixtures"}
#   ]
# }
# === /NAVMAP ===

"""
Pytest Configuration

Adds ``src`` to ``sys.path`` so the suite runs from a plain checkout, and
isolates process-wide state (cached settings, the ``VfsKit`` logger handlers)
between tests.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from VfsKit.FileOptions import reset_settings  # noqa: E402
from VfsKit.FileOptions.logging_utils import ROOT_LOGGER_NAME  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop ``VFSKIT_*`` variables and the cached settings around every test."""

    for key in list(os.environ):
        if key.upper().startswith("VFSKIT_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def vfskit_logger() -> Iterator[logging.Logger]:
    """Yield the ``VfsKit`` logger and restore its handlers and level afterwards."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


@pytest.fixture
def context():
    """Fresh HTTP options context."""

    from VfsKit.HttpOptions import HttpFileSystemOptions

    return HttpFileSystemOptions()
