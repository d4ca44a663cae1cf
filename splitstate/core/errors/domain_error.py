"""Error values returned inside Failure.

Commands that break an order rule, address a missing aggregate or lose a
version race come back as DomainError values, never as raised exceptions.
Subclasses only narrow the meaning; they add no fields.

Usage:
    @dataclass(frozen=True, slots=True, kw_only=True)
    class OrderLockedError(DomainError):
        pass
"""

from dataclasses import dataclass

from splitstate.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error value (not an Exception subclass).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
        details: Optional string context (ids, versions).
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
