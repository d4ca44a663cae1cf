"""Base domain event class.

DomainEvent is the envelope for every committed state change. It carries the
aggregate identity, a per-aggregate sequence number and a JSON-compatible
payload describing what changed. Typed payload classes live next to the
aggregate they describe (see order_events.py) and are converted to and from
the payload dict at the edges.

Architecture:
    - Frozen dataclass (immutable after creation)
    - Auto-generated event_id (uuid7, time-ordered) for event tracking
    - occurred_at timestamp (UTC)
    - sequence is strictly increasing per aggregate, starting at 1
    - Stamped by the command dispatcher, never by handlers

Usage:
    >>> event = DomainEvent(
    ...     aggregate_id="0190f1d2-...",
    ...     aggregate_type="order",
    ...     sequence=1,
    ...     event_type="OrderCreated",
    ...     payload={"customer_id": "42", "items": []},
    ... )
    >>> event.key
    ('0190f1d2-...', 1)
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Immutable record of a state change that already committed.

    All domain events MUST:
        1. Be produced only after the write store commit succeeded
        2. Use past tense event types (OrderCreated, NOT CreateOrder)
        3. Carry a payload built only from JSON-compatible values

    Attributes:
        event_id: Unique identifier for this event instance. Used to mark
            outbox entries delivered and to correlate dead letters.
        occurred_at: Timestamp when the change committed (UTC).
        aggregate_id: Identity of the aggregate that changed.
        aggregate_type: Aggregate kind (e.g., "order").
        sequence: Position in the aggregate's event history (1-based).
        event_type: Past-tense event name registered in EVENT_REGISTRY.
        payload: JSON-compatible description of the change.

    Design Decisions:
        - **Envelope + dict payload**: the outbox and projection path stay
          generic; typed payload classes validate at the edges.
        - **uuid7 ids**: time-ordered, index friendly.
        - **UTC timestamps**: projectors copy them into views verbatim so
          replay stays deterministic.
    """

    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    aggregate_id: str
    aggregate_type: str
    sequence: int
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate envelope fields.

        Raises:
            ValueError: If sequence is not positive or identity is empty.
        """
        if self.sequence < 1:
            raise ValueError("sequence must be >= 1")
        if not self.aggregate_id:
            raise ValueError("aggregate_id must not be empty")
        if not self.event_type:
            raise ValueError("event_type must not be empty")

    @property
    def key(self) -> tuple[str, int]:
        """(aggregate_id, sequence) pair identifying this event's position."""
        return (self.aggregate_id, self.sequence)
