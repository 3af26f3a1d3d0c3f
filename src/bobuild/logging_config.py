"""Structured logging configuration for the Bobuild API client.

Level and format come from BobuildConfig (BOBUILD_LOG_LEVEL and
BOBUILD_LOG_FORMAT, environment or .env). The package itself only attaches a
NullHandler; applications call configure_logging() to get output.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from .config import BobuildConfig, get_config

__all__ = [
    "LOGGER_NAMESPACE",
    "StructuredFormatter",
    "TextFormatter",
    "build_formatter",
    "configure_logging",
]

LOGGER_NAMESPACE = "bobuild"

# Extra keys whose values never reach the output
SENSITIVE_KEYS = frozenset(
    {"api_key", "apikey", "authorization", "auth", "bearer", "token", "secret", "password", "key"}
)

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the extra= fields of a record, redacting credentials."""
    context = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        context[key] = "[REDACTED]" if key.lower() in SENSITIVE_KEYS else value
    return context


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: timestamp (UTC, 'Z' suffix), level, logger, message, and context
    for extra= fields. Credential-like keys (api_key, authorization, token, ...)
    are replaced with "[REDACTED]"; values json cannot encode are str()'d.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _record_context(record)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable single-line format for local debugging."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


_FORMATTERS = {
    "json": StructuredFormatter,
    "text": TextFormatter,
}


def build_formatter(log_format: str) -> logging.Formatter:
    """Return the formatter for a log_format setting (json or text)."""
    return _FORMATTERS.get(log_format.lower(), StructuredFormatter)()


def configure_logging(
    config: Optional[BobuildConfig] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """Send bobuild log records to stderr.

    Args:
        config: Settings to read log_level / log_format from. Uses get_config()
            if not provided.
        level: Optional level override (e.g. "DEBUG"); unknown names fall back
            to INFO.

    Returns:
        The configured "bobuild" logger.

    Example:
        >>> configure_logging(BobuildConfig(log_level="DEBUG", log_format="text"))
    """
    config = config or get_config()
    level_name = (level or config.log_level).upper()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = build_formatter(config.log_format)
    stream_handlers = [
        h for h in logger.handlers if isinstance(h, logging.StreamHandler)
    ]
    if not stream_handlers:
        stream_handlers = [logging.StreamHandler()]
        logger.addHandler(stream_handlers[0])
    for handler in stream_handlers:
        handler.setFormatter(formatter)

    logger.propagate = False
    return logger
