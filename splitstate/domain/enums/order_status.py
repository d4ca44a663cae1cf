"""Order lifecycle status.

State Machine:
    PENDING → PAID | SHIPPED | CANCELLED
    PAID → SHIPPED | CANCELLED
    SHIPPED → DELIVERED
    DELIVERED, CANCELLED: final
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status."""

    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    def allowed_transitions(self) -> frozenset["OrderStatus"]:
        """Statuses reachable from this one in a single step."""
        return _TRANSITIONS[self]

    def can_transition_to(self, target: "OrderStatus") -> bool:
        """Check if moving to target is a valid transition."""
        return target in _TRANSITIONS[self]

    def accepts_item_changes(self) -> bool:
        """Items may only be added before the order ships or closes."""
        return self in (OrderStatus.PENDING, OrderStatus.PAID)

    @classmethod
    def final_states(cls) -> frozenset["OrderStatus"]:
        """Statuses with no outgoing transitions."""
        return frozenset(status for status in cls if not _TRANSITIONS[status])


_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}
