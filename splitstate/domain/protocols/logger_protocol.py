"""LoggerProtocol definition for structured logging.

This protocol standardizes structured logging across the codebase while
remaining backend-agnostic. Implementations MUST ensure logs are structured
(message + key-value context).

Log Levels:
    - DEBUG: Per-event diagnostics (buffering, duplicates)
    - INFO: Normal operational events (command dispatched, view rebuilt)
    - WARNING: Degraded freshness (retry scheduled, delivery failed)
    - ERROR: Event dead-lettered, view stalled
    - CRITICAL: System-wide failure, immediate attention

Usage:
    from splitstate.core.container import get_logger

    logger = get_logger()
    logger.info("command_dispatched", aggregate_id=aggregate_id, version=2)

    engine_logger = logger.bind(component="projection_engine")
    engine_logger.warning("projection_retry_scheduled", attempt=2)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls MUST be structured: message + key-value context.
    Supports 5 standard log levels and context binding.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Snake_case event name (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Snake_case event name.
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for catastrophic failures."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged (immutable pattern).

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...
