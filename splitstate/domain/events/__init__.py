"""Domain events package.

Exports the DomainEvent envelope, typed payloads and the event registry.

Usage:
    from splitstate.domain.events import DomainEvent, OrderCreated, EVENT_REGISTRY
"""

from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.events.order_events import (
    OrderCreated,
    OrderDeleted,
    OrderItemAdded,
    OrderStatusChanged,
)
from splitstate.domain.events.payload import EventPayload
from splitstate.domain.events.registry import (
    EVENT_REGISTRY,
    ORDER_AGGREGATE,
    EventMetadata,
    get_event_metadata,
    get_events_for_aggregate,
    is_terminal,
)

__all__ = [
    "DomainEvent",
    "EVENT_REGISTRY",
    "EventMetadata",
    "EventPayload",
    "ORDER_AGGREGATE",
    "OrderCreated",
    "OrderDeleted",
    "OrderItemAdded",
    "OrderStatusChanged",
    "get_event_metadata",
    "get_events_for_aggregate",
    "is_terminal",
]
