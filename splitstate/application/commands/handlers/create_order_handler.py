"""CreateOrder command handler.

Validates the initial lines and builds a new Order aggregate. The dispatcher
supplies the aggregate id (client-supplied or freshly generated) and persists
the result with expected_version 0.

Architecture:
- Application layer handler (business decision only, no I/O)
- Returns Result types
- Emits exactly one OrderCreated payload
"""

from splitstate.application.commands.handler import Decision
from splitstate.application.commands.order_commands import CreateOrder
from splitstate.core.result import Failure, Result, Success
from splitstate.domain.entities.order import Order
from splitstate.domain.events.order_events import OrderCreated


class CreateOrderHandler:
    """Handler for CreateOrder command."""

    aggregate_type = Order
    creates_aggregate = True

    def target_id(self, cmd: CreateOrder) -> str | None:
        return cmd.order_id

    def decide(
        self, cmd: CreateOrder, aggregate: Order | None, *, aggregate_id: str
    ) -> Result[Decision, str]:
        """Handle CreateOrder command.

        Args:
            cmd: CreateOrder command.
            aggregate: Always None (creation command).
            aggregate_id: Id assigned to the new order.

        Returns:
            Success(Decision): New order and its OrderCreated payload.
            Failure(error): OrderError constant (no items, invalid line, ...).
        """
        result = Order.create(
            order_id=aggregate_id,
            customer_id=cmd.customer_id,
            items=cmd.items,
        )
        if isinstance(result, Failure):
            return result

        order = result.value
        return Success(
            value=Decision(
                aggregate=order,
                changes=[
                    OrderCreated(
                        customer_id=order.customer_id,
                        items=tuple(order.items),
                        status=order.status,
                    )
                ],
            )
        )
