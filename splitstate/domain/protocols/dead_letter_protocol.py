"""DeadLetterStore protocol (port).

Events the projection engine could not apply (semantic failures, exhausted
retries) are recorded here. The affected view stalls until an operator
rebuilds or resumes it, so staleness is visible rather than silent.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class DeadLetter:
    """One event that failed projection.

    Attributes:
        event_id: Failed event's id.
        projection: View kind that failed.
        aggregate_id: Aggregate the event belongs to.
        sequence: Failed event's sequence number.
        event_type: Failed event's type.
        payload: Failed event's payload (as delivered).
        reason: Exception message.
        error_type: Exception class name.
        attempts: Number of attempts made before giving up.
        recorded_at: When the dead letter was recorded.
    """

    event_id: UUID
    projection: str
    aggregate_id: str
    sequence: int
    event_type: str
    payload: dict[str, Any]
    reason: str
    error_type: str
    attempts: int
    recorded_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class DeadLetterStore(Protocol):
    """Dead-letter store protocol (port)."""

    async def record(self, dead_letter: DeadLetter) -> None:
        """Persist a dead letter."""
        ...

    async def find(self, aggregate_id: str | None = None) -> list[DeadLetter]:
        """Dead letters, optionally for one aggregate, oldest first."""
        ...
