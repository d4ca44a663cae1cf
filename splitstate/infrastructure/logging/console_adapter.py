"""Structured console logging.

Logs go to stdout through structlog:
- Development: colored key-value console renderer
- Testing/CI/production: one JSON object per line

ConsoleAdapter satisfies LoggerProtocol structurally; it does not inherit
from it.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, level: str = "INFO", use_json: bool = False) -> None:
    """Configure structlog processors and level filtering.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        use_json: JSON lines when True, console renderer when False.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if use_json:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[level.upper()]
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


class ConsoleAdapter:
    """structlog-backed logger.

    Args:
        component: Value bound as `component` on every entry (e.g., "dispatcher").
    """

    def __init__(self, *, component: str = "splitstate") -> None:
        self._logger = structlog.get_logger().bind(component=component)

    def debug(self, message: str, /, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error, flattening the exception into error_type/error_message."""
        self._logger.error(message, **_with_error(error, context))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical failure, flattening the exception like error()."""
        self._logger.critical(message, **_with_error(error, context))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return a new adapter with context bound to every entry.

        Args:
            **context: Key-value pairs to bind.

        Returns:
            ConsoleAdapter: New adapter sharing the configuration.
        """
        bound = ConsoleAdapter.__new__(ConsoleAdapter)
        bound._logger = self._logger.bind(**context)
        return bound


def _with_error(error: Exception | None, context: dict[str, Any]) -> dict[str, Any]:
    if error is not None:
        context["error_type"] = type(error).__name__
        context["error_message"] = str(error)
    return context
