"""
Structured Logging Utilities

This module centralizes structured logging setup for the file option layer. It
provides helpers for masking credentials carried by option payloads (proxy
passwords, tokens), emitting JSON log records, and attaching the managed
handlers to the ``VfsKit`` logger without duplicating them on reconfiguration.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .settings import FileOptionSettings

ROOT_LOGGER_NAME = "VfsKit"
MASK = "***masked***"

_SENSITIVE_KEYS = {"authorization", "password", "passwd", "secret", "token", "api_key", "apikey"}


def mask_sensitive_data(payload: Any) -> Any:
    """Remove secrets from structured payloads prior to logging.

    Args:
        payload: JSON-compatible value, typically an option's ``get_value()``
            or a ``{name: value}`` log payload. Mappings are walked recursively.

    Returns:
        Copy of the payload where common secret fields are replaced with
        `***masked***`.

    Examples:
        >>> mask_sensitive_data({"id": "user", "password": "secret"})
        {'id': 'user', 'password': '***masked***'}
    """
    if isinstance(payload, dict):
        masked: Dict[str, Any] = {}
        for key, value in payload.items():
            if isinstance(key, str) and key.lower() in _SENSITIVE_KEYS:
                masked[key] = MASK
            else:
                masked[key] = mask_sensitive_data(value)
        return masked
    if isinstance(payload, list):
        return [mask_sensitive_data(item) for item in payload]
    return payload


class JSONFormatter(logging.Formatter):
    """Formatter emitting JSON structured logs.

    Examples:
        >>> formatter = JSONFormatter()
        >>> isinstance(formatter.format(logging.makeLogRecord({'msg': 'test'})), str)
        True
    """

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a logging record into a JSON line.

        Args:
            record: Log record emitted by the file option components.

        Returns:
            JSON string with masked secrets and option context.
        """
        now = datetime.now(timezone.utc)
        log_obj: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "stage": getattr(record, "stage", None),
            "option": getattr(record, "option", None),
        }
        for key in ("value", "plugin", "error", "version"):
            if hasattr(record, key):
                log_obj[key] = getattr(record, key)
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(log_obj), default=str)


def setup_logging(settings: Optional["FileOptionSettings"] = None) -> logging.Logger:
    """Configure structured logging handlers for the file option layer.

    Args:
        settings: Settings carrying the level and optional JSON log file.
            Defaults to :func:`VfsKit.FileOptions.settings.get_settings`.

    Returns:
        Configured logger instance scoped to ``VfsKit``.

    Examples:
        >>> logger = setup_logging()
        >>> logger.name
        'VfsKit'
    """
    if settings is None:
        from .settings import get_settings

        settings = get_settings()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_vfskit_managed", False):
            logger.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    stream_handler._vfskit_managed = True  # type: ignore[attr-defined]
    logger.addHandler(stream_handler)

    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        file_handler._vfskit_managed = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    logger.propagate = True
    return logger


__all__ = ["ROOT_LOGGER_NAME", "JSONFormatter", "mask_sensitive_data", "setup_logging"]
