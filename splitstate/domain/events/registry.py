"""Domain Events Registry - catalogue of every event type.

The registry is the single source of truth for:
- Mapping event_type strings back to payload classes
- Which aggregate type emits each event
- Which events are terminal (views are tombstoned)

Tests verify every payload class is registered exactly once.

Adding a new event:
1. Define the payload dataclass (EVENT_TYPE + to_payload/from_payload)
2. Add an EventMetadata entry to EVENT_REGISTRY below
3. Teach the relevant projectors to handle it
"""

from dataclasses import dataclass

from splitstate.domain.events.order_events import (
    OrderCreated,
    OrderDeleted,
    OrderItemAdded,
    OrderStatusChanged,
)
from splitstate.domain.events.payload import EventPayload

ORDER_AGGREGATE = "order"


@dataclass(frozen=True, kw_only=True)
class EventMetadata:
    """Metadata for one registered event type.

    Attributes:
        payload_class: Typed payload dataclass.
        aggregate_type: Aggregate kind that emits the event.
        terminal: True if the event ends the aggregate's lifecycle.
        description: Human-readable description for documentation.
    """

    payload_class: type[EventPayload]
    aggregate_type: str
    terminal: bool = False
    description: str = ""

    @property
    def event_type(self) -> str:
        """Event type string carried by DomainEvent.event_type."""
        return self.payload_class.EVENT_TYPE


EVENT_REGISTRY: list[EventMetadata] = [
    EventMetadata(
        payload_class=OrderCreated,
        aggregate_type=ORDER_AGGREGATE,
        description="Order placed with its initial lines",
    ),
    EventMetadata(
        payload_class=OrderItemAdded,
        aggregate_type=ORDER_AGGREGATE,
        description="Line appended to an open order",
    ),
    EventMetadata(
        payload_class=OrderStatusChanged,
        aggregate_type=ORDER_AGGREGATE,
        description="Order lifecycle transition",
    ),
    EventMetadata(
        payload_class=OrderDeleted,
        aggregate_type=ORDER_AGGREGATE,
        terminal=True,
        description="Order removed; views are tombstoned",
    ),
]


def get_event_metadata(event_type: str) -> EventMetadata | None:
    """Look up registry entry by event type string.

    Args:
        event_type: Event type (e.g., "OrderCreated").

    Returns:
        EventMetadata if registered, None otherwise.
    """
    for metadata in EVENT_REGISTRY:
        if metadata.event_type == event_type:
            return metadata
    return None


def get_events_for_aggregate(aggregate_type: str) -> list[EventMetadata]:
    """All registered events emitted by an aggregate type."""
    return [m for m in EVENT_REGISTRY if m.aggregate_type == aggregate_type]


def is_terminal(event_type: str) -> bool:
    """Check whether an event type ends its aggregate's lifecycle."""
    metadata = get_event_metadata(event_type)
    return metadata is not None and metadata.terminal
