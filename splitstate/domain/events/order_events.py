"""Order domain event payloads.

Each payload class maps to one past-tense event type. Command handlers build
payloads; the dispatcher wraps them in DomainEvent envelopes once the write
commits; projectors parse them back with from_payload().

Events:
    - OrderCreated: new order with its initial lines
    - OrderItemAdded: one more line on an open order
    - OrderStatusChanged: lifecycle transition
    - OrderDeleted: terminal event, views are tombstoned
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Self

from splitstate.domain.enums.order_status import OrderStatus
from splitstate.domain.errors.projection_error import MalformedPayloadError
from splitstate.domain.events.payload import EventPayload
from splitstate.domain.value_objects.order_item import OrderItem


def _parse_item(event_type: str, data: Any) -> OrderItem:
    if not isinstance(data, dict):
        raise MalformedPayloadError(event_type, "item must be an object")
    try:
        return OrderItem.from_dict(data)
    except (KeyError, ValueError, TypeError) as e:
        raise MalformedPayloadError(event_type, f"invalid item: {e}") from e


def _parse_status(event_type: str, value: Any) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as e:
        raise MalformedPayloadError(event_type, f"unknown status {value!r}") from e


def _require(event_type: str, payload: dict[str, Any], key: str) -> Any:
    if key not in payload:
        raise MalformedPayloadError(event_type, f"missing '{key}'")
    return payload[key]


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderCreated(EventPayload):
    """Order placed by a customer.

    Attributes:
        customer_id: Customer who placed the order.
        items: Initial order lines.
        status: Initial status (always PENDING today).
    """

    EVENT_TYPE: ClassVar[str] = "OrderCreated"

    customer_id: str
    items: tuple[OrderItem, ...]
    status: OrderStatus = OrderStatus.PENDING

    def to_payload(self) -> dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "items": [item.to_dict() for item in self.items],
            "status": self.status.value,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        customer_id = _require(cls.EVENT_TYPE, payload, "customer_id")
        raw_items = _require(cls.EVENT_TYPE, payload, "items")
        if not isinstance(raw_items, list):
            raise MalformedPayloadError(cls.EVENT_TYPE, "items must be a list")
        return cls(
            customer_id=str(customer_id),
            items=tuple(_parse_item(cls.EVENT_TYPE, item) for item in raw_items),
            status=_parse_status(
                cls.EVENT_TYPE, payload.get("status", OrderStatus.PENDING.value)
            ),
        )


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderItemAdded(EventPayload):
    """Line appended to an open order."""

    EVENT_TYPE: ClassVar[str] = "OrderItemAdded"

    item: OrderItem

    def to_payload(self) -> dict[str, Any]:
        return {"item": self.item.to_dict()}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        return cls(item=_parse_item(cls.EVENT_TYPE, _require(cls.EVENT_TYPE, payload, "item")))


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderStatusChanged(EventPayload):
    """Order moved from one lifecycle status to another."""

    EVENT_TYPE: ClassVar[str] = "OrderStatusChanged"

    previous_status: OrderStatus
    status: OrderStatus

    def to_payload(self) -> dict[str, Any]:
        return {
            "previous_status": self.previous_status.value,
            "status": self.status.value,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        return cls(
            previous_status=_parse_status(
                cls.EVENT_TYPE, _require(cls.EVENT_TYPE, payload, "previous_status")
            ),
            status=_parse_status(cls.EVENT_TYPE, _require(cls.EVENT_TYPE, payload, "status")),
        )


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderDeleted(EventPayload):
    """Order removed (terminal event)."""

    EVENT_TYPE: ClassVar[str] = "OrderDeleted"

    reason: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"reason": self.reason}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        reason = payload.get("reason")
        return cls(reason=None if reason is None else str(reason))
