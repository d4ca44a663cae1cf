"""Application layer error types.

Application-level errors wrap domain errors and add CQRS execution context.
They are returned (never raised) by the dispatcher and the query service.

Exports:
    ApplicationErrorCode: Application-level error code enum
    ApplicationError: Application layer error dataclass
"""

from dataclasses import dataclass
from enum import Enum

from splitstate.core.errors.domain_error import DomainError


class ApplicationErrorCode(Enum):
    """Application-level error codes.

    COMMAND_REJECTED: business-rule validation failed; resubmit corrected input.
    CONCURRENT_MODIFICATION: optimistic-concurrency loss; reload and retry.
    UNKNOWN_COMMAND: no handler registered for the command type.
    NOT_FOUND: target aggregate or view does not exist.
    COMMAND_EXECUTION_FAILED: write store failed before commit; nothing written.
    QUERY_FAILED: query could not be served (unknown projection, bad criteria).
    """

    COMMAND_REJECTED = "command_rejected"
    CONCURRENT_MODIFICATION = "concurrent_modification"
    UNKNOWN_COMMAND = "unknown_command"
    NOT_FOUND = "not_found"
    COMMAND_EXECUTION_FAILED = "command_execution_failed"
    QUERY_FAILED = "query_failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplicationError:
    """Application layer error.

    Attributes:
        code: Application error code (from ApplicationErrorCode enum)
        message: Human-readable error message
        domain_error: Original domain error (if error originated from domain layer)
        details: Additional context as key-value pairs

    Examples:
        >>> error = ApplicationError(
        ...     code=ApplicationErrorCode.CONCURRENT_MODIFICATION,
        ...     message="Order was modified concurrently",
        ...     details={"expected_version": "1", "actual_version": "2"},
        ... )
    """

    code: ApplicationErrorCode
    message: str
    domain_error: DomainError | None = None
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
