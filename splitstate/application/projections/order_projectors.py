"""Order view projectors.

Two views are derived from the order event stream:

    order_summary: one row per order for listing and filtering
        {order_id, customer_id, status, item_count, line_count,
         total_amount, created_at, updated_at}
    order_lines: line-item detail of one order
        {order_id, customer_id, lines: [{sku, quantity, unit_price, line_total}]}

Amounts are serialized as decimal strings and timestamps are copied from
event.occurred_at, so replaying the same history always yields the same
content.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from splitstate.domain.errors.projection_error import SemanticProjectionError
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.events.order_events import (
    OrderCreated,
    OrderDeleted,
    OrderItemAdded,
    OrderStatusChanged,
)
from splitstate.domain.events.registry import ORDER_AGGREGATE
from splitstate.domain.value_objects.order_item import OrderItem

ORDER_SUMMARY = "order_summary"
ORDER_LINES = "order_lines"


def _line(item: OrderItem) -> dict[str, Any]:
    return {
        "sku": item.sku,
        "quantity": item.quantity,
        "unit_price": str(item.unit_price),
        "line_total": str(item.line_total),
    }


class _OrderProjector(ABC):
    """Shared routing for order views (keyed by order id).

    Subclasses build the view on creation and fold added items into it;
    status changes are optional.
    """

    name = ""
    aggregate_type = ORDER_AGGREGATE

    _EVENT_TYPES = frozenset(
        {
            OrderCreated.EVENT_TYPE,
            OrderItemAdded.EVENT_TYPE,
            OrderStatusChanged.EVENT_TYPE,
            OrderDeleted.EVENT_TYPE,
        }
    )

    def handles(self, event_type: str) -> bool:
        return event_type in self._EVENT_TYPES

    def view_id(self, event: DomainEvent) -> str:
        return event.aggregate_id

    def apply(
        self, content: dict[str, Any] | None, event: DomainEvent
    ) -> dict[str, Any] | None:
        if event.event_type == OrderCreated.EVENT_TYPE:
            if content is not None:
                raise SemanticProjectionError(
                    f"{self.name} view for order {event.aggregate_id} already exists"
                )
            return self._created(OrderCreated.from_payload(event.payload), event)

        if event.event_type == OrderDeleted.EVENT_TYPE:
            OrderDeleted.from_payload(event.payload)
            return None

        if content is None:
            raise SemanticProjectionError(
                f"{event.event_type} for order {event.aggregate_id} "
                f"has no {self.name} view to apply to"
            )
        updated = dict(content)
        if event.event_type == OrderItemAdded.EVENT_TYPE:
            self._item_added(updated, OrderItemAdded.from_payload(event.payload), event)
        elif event.event_type == OrderStatusChanged.EVENT_TYPE:
            self._status_changed(
                updated, OrderStatusChanged.from_payload(event.payload), event
            )
        else:
            raise SemanticProjectionError(
                f"{self.name} cannot apply event type {event.event_type}"
            )
        return updated

    @abstractmethod
    def _created(self, change: OrderCreated, event: DomainEvent) -> dict[str, Any]:
        """Initial view content for a new order."""

    @abstractmethod
    def _item_added(
        self, content: dict[str, Any], change: OrderItemAdded, event: DomainEvent
    ) -> None:
        """Fold an added line into content (in place)."""

    def _status_changed(
        self, content: dict[str, Any], change: OrderStatusChanged, event: DomainEvent
    ) -> None:
        pass


class OrderSummaryProjector(_OrderProjector):
    """Builds the order_summary view."""

    name = ORDER_SUMMARY

    def _created(self, change: OrderCreated, event: DomainEvent) -> dict[str, Any]:
        timestamp = event.occurred_at.isoformat()
        return {
            "order_id": event.aggregate_id,
            "customer_id": change.customer_id,
            "status": change.status.value,
            "item_count": sum(item.quantity for item in change.items),
            "line_count": len(change.items),
            "total_amount": str(sum((item.line_total for item in change.items), Decimal("0"))),
            "created_at": timestamp,
            "updated_at": timestamp,
        }

    def _item_added(
        self, content: dict[str, Any], change: OrderItemAdded, event: DomainEvent
    ) -> None:
        content["item_count"] = content["item_count"] + change.item.quantity
        content["line_count"] = content["line_count"] + 1
        content["total_amount"] = str(
            Decimal(content["total_amount"]) + change.item.line_total
        )
        content["updated_at"] = event.occurred_at.isoformat()

    def _status_changed(
        self, content: dict[str, Any], change: OrderStatusChanged, event: DomainEvent
    ) -> None:
        content["status"] = change.status.value
        content["updated_at"] = event.occurred_at.isoformat()


class OrderLinesProjector(_OrderProjector):
    """Builds the order_lines view."""

    name = ORDER_LINES

    def handles(self, event_type: str) -> bool:
        # Status changes do not touch line items.
        return event_type != OrderStatusChanged.EVENT_TYPE and super().handles(event_type)

    def _created(self, change: OrderCreated, event: DomainEvent) -> dict[str, Any]:
        return {
            "order_id": event.aggregate_id,
            "customer_id": change.customer_id,
            "lines": [_line(item) for item in change.items],
        }

    def _item_added(
        self, content: dict[str, Any], change: OrderItemAdded, event: DomainEvent
    ) -> None:
        content["lines"] = [*content["lines"], _line(change.item)]


def default_projectors() -> list[_OrderProjector]:
    """Projectors wired into the engine by the composition root."""
    return [OrderSummaryProjector(), OrderLinesProjector()]
