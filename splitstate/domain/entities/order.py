"""Order aggregate.

The only write-side entity shipped with the package. Holds the authoritative
order state and enforces its business rules. Mutated only inside command
handlers; persisted only by the command dispatcher.

Architecture:
    - Pure domain entity (no infrastructure dependencies)
    - Uses Result types (railway-oriented programming)
    - NO event collection (handlers build event payloads)
    - State machine with validated transitions (see OrderStatus)

Usage:
    result = Order.create(order_id=new_id, customer_id="42", items=items)
    match result:
        case Success(value=order):
            order.change_status(OrderStatus.SHIPPED)
        case Failure(error=reason):
            ...
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, ClassVar, Self

from splitstate.core.result import Failure, Result, Success
from splitstate.domain.enums.order_status import OrderStatus
from splitstate.domain.errors.order_error import OrderError
from splitstate.domain.events.registry import ORDER_AGGREGATE
from splitstate.domain.value_objects.order_item import OrderItem


@dataclass
class Order:
    """Customer order aggregate.

    Attributes:
        id: Order identifier (opaque string).
        customer_id: Customer who placed the order.
        items: Order lines in insertion order.
        status: Current lifecycle status.
        version: Write-side version (0 until first save).
        last_sequence: Highest event sequence number emitted.
        deleted: True once DeleteOrder committed.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    AGGREGATE_TYPE: ClassVar[str] = ORDER_AGGREGATE

    id: str
    customer_id: str
    items: list[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    version: int = 0
    last_sequence: int = 0
    deleted: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        order_id: str,
        customer_id: str,
        items: list[OrderItem] | tuple[OrderItem, ...],
    ) -> Result["Order", str]:
        """Validate and build a new order.

        Args:
            order_id: Identifier for the new order.
            customer_id: Customer placing the order.
            items: Initial order lines (at least one).

        Returns:
            Success(Order): New unsaved order (version 0).
            Failure(error): OrderError constant.
        """
        if not customer_id:
            return Failure(error=OrderError.INVALID_CUSTOMER)
        if not items:
            return Failure(error=OrderError.NO_ITEMS)
        for item in items:
            check = item.validate()
            if isinstance(check, Failure):
                return check
        return Success(value=cls(id=order_id, customer_id=customer_id, items=list(items)))

    # -------------------------------------------------------------------------
    # Query Methods (Read-Only)
    # -------------------------------------------------------------------------

    @property
    def total_amount(self) -> Decimal:
        """Sum of all line totals."""
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------------
    # State Transition Methods (Return Result)
    # -------------------------------------------------------------------------

    def add_item(self, item: OrderItem) -> Result[None, str]:
        """Append a line to an open order.

        Returns:
            Success(None): Line added.
            Failure(error): Order deleted, locked, or line invalid.
        """
        if self.deleted:
            return Failure(error=OrderError.ORDER_DELETED)
        if not self.status.accepts_item_changes():
            return Failure(error=OrderError.ORDER_LOCKED)
        check = item.validate()
        if isinstance(check, Failure):
            return check
        self.items.append(item)
        self.updated_at = datetime.now(UTC)
        return Success(value=None)

    def change_status(self, target: OrderStatus) -> Result[OrderStatus, str]:
        """Move the order to a new lifecycle status.

        Returns:
            Success(previous_status): Transition applied.
            Failure(error): Order deleted or transition not allowed.
        """
        if self.deleted:
            return Failure(error=OrderError.ORDER_DELETED)
        if not self.status.can_transition_to(target):
            return Failure(error=OrderError.INVALID_STATUS_TRANSITION)
        previous = self.status
        self.status = target
        self.updated_at = datetime.now(UTC)
        return Success(value=previous)

    def mark_deleted(self) -> Result[None, str]:
        """Flag the order as deleted (terminal).

        Returns:
            Success(None): Order flagged.
            Failure(error): Order already deleted.
        """
        if self.deleted:
            return Failure(error=OrderError.ORDER_DELETED)
        self.deleted = True
        self.updated_at = datetime.now(UTC)
        return Success(value=None)

    # -------------------------------------------------------------------------
    # Persistence mapping
    # -------------------------------------------------------------------------

    def to_state(self) -> dict[str, Any]:
        """Serialize authoritative state to a JSON-compatible dict."""
        return {
            "customer_id": self.customer_id,
            "items": [item.to_dict() for item in self.items],
            "status": self.status.value,
            "deleted": self.deleted,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_state(
        cls,
        aggregate_id: str,
        state: dict[str, Any],
        version: int,
        last_sequence: int,
    ) -> Self:
        """Rebuild an order from its stored state."""
        return cls(
            id=aggregate_id,
            customer_id=state["customer_id"],
            items=[OrderItem.from_dict(item) for item in state["items"]],
            status=OrderStatus(state["status"]),
            version=version,
            last_sequence=last_sequence,
            deleted=state.get("deleted", False),
            created_at=datetime.fromisoformat(state["created_at"]),
            updated_at=datetime.fromisoformat(state["updated_at"]),
        )
