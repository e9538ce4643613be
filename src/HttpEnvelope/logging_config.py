"""
Structured Logging Utilities

This module centralizes logging setup for the package. Every component logs
through a child of the ``HttpEnvelope`` logger; :func:`setup_logging`
attaches a single stream handler that emits either JSON lines or plain text.
Decode failures attach the offending payload under ``extra_fields`` so the
JSON formatter can include it, truncated and with secrets masked.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Dict, Optional

from HttpEnvelope.settings import LoggingSettings

ROOT_LOGGER_NAME = "HttpEnvelope"
MAX_FIELD_CHARS = 4096

_HANDLER_MARKER = "_http_envelope_handler"


def mask_sensitive_data(payload: Dict[str, object]) -> Dict[str, object]:
    """Remove secrets from structured payloads prior to logging.

    Args:
        payload: Arbitrary key-value pairs that may contain credentials or
            tokens gathered from request headers.

    Returns:
        Copy of the payload where common secret fields are replaced with
        `***masked***`.

    Examples:
        >>> mask_sensitive_data({"authorization": "Bearer x", "status": 200})
        {'authorization': '***masked***', 'status': 200}
    """
    sensitive_keys = {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
        "api_key",
        "apikey",
        "token",
        "secret",
        "password",
    }
    masked: Dict[str, object] = {}
    for key, value in payload.items():
        if key.lower() in sensitive_keys:
            masked[key] = "***masked***"
        else:
            masked[key] = value
    return masked


def _truncate(value: object) -> object:
    if isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
        return value[:MAX_FIELD_CHARS] + f"... ({len(value) - MAX_FIELD_CHARS} more chars)"
    return value


class JSONFormatter(logging.Formatter):
    """Formatter emitting JSON structured logs.

    Examples:
        >>> formatter = JSONFormatter()
        >>> isinstance(formatter.format(logging.makeLogRecord({'msg': 'test'})), str)
        True
    """

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        log_obj: Dict[str, object] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_obj.update({key: _truncate(value) for key, value in extra_fields.items()})
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(log_obj), default=str)


class TextFormatter(logging.Formatter):
    """Plain-text formatter that appends ``extra_fields`` as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict) and extra_fields:
            masked = mask_sensitive_data(extra_fields)
            line += " " + " ".join(f"{key}={_truncate(value)!r}" for key, value in masked.items())
        return line


def setup_logging(
    config: Optional[LoggingSettings] = None, stream: Optional[IO[str]] = None
) -> logging.Logger:
    """Configure the ``HttpEnvelope`` logger.

    Calling this repeatedly replaces the previously installed handler rather
    than stacking handlers.

    Args:
        config: Logging settings; defaults to :class:`LoggingSettings`.
        stream: Destination stream, ``sys.stderr`` by default.

    Returns:
        The configured package logger.
    """
    config = config or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(config.level_int())

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if config.emit_json_logs else TextFormatter())
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    return logger


__all__ = [
    "JSONFormatter",
    "ROOT_LOGGER_NAME",
    "TextFormatter",
    "mask_sensitive_data",
    "setup_logging",
]
