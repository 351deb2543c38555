"""
Structured logging for MovieFetch.

This module provides helpers that record logs enriched with operation
context, plus the logger setup used by the CLI.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from moviefetch.shared.errors import ErrorContext, MovieFetchError


class StructuredFormatter(logging.Formatter):
    """
    Formatter that renders log records as JSON lines.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: Log record

        Returns:
            JSON encoded log entry
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Optional context attached through `extra`
        for attribute in ("error_code", "context", "operation", "duration_ms", "result_info"):
            if hasattr(record, attribute):
                log_entry[attribute] = getattr(record, attribute)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """
    Create the Rich console used for log output.

    Returns:
        Configured Rich Console instance
    """
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.message": "white",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = "moviefetch",
    level: str = "INFO",
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        name: Logger name (default: "moviefetch")
        level: Log level name (default: "INFO")
        log_file: Optional path of a JSON log file
        use_rich_console: Use Rich for console output instead of JSON lines

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers when called more than once
    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    if use_rich_console:
        handler: logging.Handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format="[%H:%M:%S]",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    handler.setLevel(log_level)
    logger.addHandler(handler)

    # File output is always JSON
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def _context_to_dict(context: (dict[str, Any] | ErrorContext) | None) -> dict[str, Any]:
    if context is None:
        return {}
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context)


def log_operation_error(
    logger: logging.Logger,
    error: MovieFetchError,
    operation: str | None = None,
    additional_context: (dict[str, Any] | ErrorContext) | None = None,
    *,
    level: int = logging.ERROR,
) -> None:
    """
    Record a structured log entry for a MovieFetchError.

    Args:
        logger: Logger instance
        error: The error to record
        operation: Operation name, defaults to the error context's operation
        additional_context: Extra context merged into the entry
        level: Log level (default: ERROR)
    """
    context_dict: dict[str, Any] = error.context.safe_dict()
    context_dict.update(_context_to_dict(additional_context))

    logger.log(
        level,
        error.message,
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error is not None and level >= logging.ERROR,
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: (dict[str, Any] | ErrorContext) | None = None,
) -> None:
    """
    Record a debug log entry for a completed operation.

    Args:
        logger: Logger instance
        operation: Operation name
        duration_ms: Duration in milliseconds
        result_info: Result information (optional)
        context: Context information (optional)
    """
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_to_dict(context),
        },
    )


def log_api_call(
    logger: logging.Logger,
    endpoint: str,
    method: str = "GET",
    status_code: int | None = None,
    duration_ms: float | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """
    Record a log entry for one HTTP call.

    Args:
        logger: Logger instance
        endpoint: Requested URL, without query string
        method: HTTP method (default: "GET")
        status_code: HTTP status code (optional)
        duration_ms: Duration in milliseconds (optional)
        context: Context information (optional)
    """
    api_context: dict[str, Any] = {
        "endpoint": endpoint,
        "method": method,
    }

    if status_code is not None:
        api_context["status_code"] = status_code
    if duration_ms is not None:
        api_context["duration_ms"] = duration_ms
    if context:
        api_context.update(context)

    level = logging.DEBUG
    message = f"API call to {endpoint}"

    if status_code is not None:
        if status_code >= 400:
            level = logging.WARNING
            message += f" failed with status {status_code}"
        else:
            message += f" succeeded with status {status_code}"

    logger.log(
        level,
        message,
        extra={
            "operation": "api_call",
            "context": api_context,
        },
    )
