"""Order commands (CQRS write operations).

Commands represent intent to change order state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers decide; the dispatcher loads, persists and emits events
- Dispatch returns only (aggregate_id, version) on success

Mutation commands carry an optional expected_version. When supplied, the
dispatcher rejects the command with CONCURRENT_MODIFICATION if the stored
version differs, without running the handler.
"""

from dataclasses import dataclass

from splitstate.domain.enums.order_status import OrderStatus
from splitstate.domain.value_objects.order_item import OrderItem


@dataclass(frozen=True, kw_only=True)
class CreateOrder:
    """Place a new order.

    Attributes:
        customer_id: Customer placing the order.
        items: Initial order lines (at least one).
        order_id: Optional client-supplied id; generated (uuid7) when omitted.

    Example:
        >>> command = CreateOrder(
        ...     customer_id="42",
        ...     items=(OrderItem(sku="A", quantity=1, unit_price=Decimal("9.99")),),
        ... )
        >>> result = await dispatcher.dispatch(command)
    """

    customer_id: str
    items: tuple[OrderItem, ...]
    order_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class AddOrderItem:
    """Append a line to an open order.

    Attributes:
        order_id: Target order.
        item: Line to add.
        expected_version: Version the caller last saw (optional).
    """

    order_id: str
    item: OrderItem
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class ChangeOrderStatus:
    """Move an order through its lifecycle.

    State Transition: see OrderStatus.

    Attributes:
        order_id: Target order.
        status: Desired status.
        expected_version: Version the caller last saw (optional).
    """

    order_id: str
    status: OrderStatus
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class DeleteOrder:
    """Delete an order (emits the terminal OrderDeleted event).

    Attributes:
        order_id: Target order.
        reason: Optional free-text reason recorded in the event.
        expected_version: Version the caller last saw (optional).
    """

    order_id: str
    reason: str | None = None
    expected_version: int | None = None
