"""Timing utilities for structured logging.

Wraps a single HTTP exchange (or any other operation) and records its
duration with time.perf_counter() for sub-millisecond precision.
"""

import logging
import time
from contextlib import contextmanager
from typing import Optional


@contextmanager
def timed_operation(
    operation: str,
    logger: logging.Logger,
    level: int = logging.INFO,
    extra: Optional[dict] = None,
):
    """Context manager for timing operations with structured logging.

    - Captures start time on entry using time.perf_counter()
    - Logs duration on exit (success or failure)
    - Re-raises exceptions after logging

    Args:
        operation: Operation name (used in log message as {operation}_completed)
        logger: Logger instance to use for logging
        level: Log level for both outcomes (default: INFO)
        extra: Optional dict of extra context to include in log

    Yields:
        dict that the caller may update with additional context (for example
        the response status code); it is merged into the completion record.

    Example:
        >>> logger = logging.getLogger("bobuild.client")
        >>> with timed_operation("bobuild_request", logger, extra={"method": "GET"}) as ctx:
        ...     ctx["status_code"] = 200

    Logs on success:
        {"timestamp": "...", "level": "INFO", "message": "bobuild_request_completed",
         "context": {"method": "GET", "status_code": 200, "duration_ms": 12.3, "status": "success"}}

    Logs on failure:
        {"timestamp": "...", "level": "INFO", "message": "bobuild_request_failed",
         "context": {"method": "GET", "duration_ms": 3.0, "status": "failed",
                     "error": "...", "error_type": "ConnectError"}}
    """
    start = time.perf_counter()
    context: dict = dict(extra or {})

    try:
        yield context
    except Exception as e:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.log(
            level,
            f"{operation}_failed",
            extra={
                **context,
                "duration_ms": round(duration_ms, 2),
                "status": "failed",
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        raise

    duration_ms = (time.perf_counter() - start) * 1000
    logger.log(
        level,
        f"{operation}_completed",
        extra={
            **context,
            "duration_ms": round(duration_ms, 2),
            "status": "success",
        },
    )
