"""ChangeOrderStatus command handler.

Moves an order through its lifecycle (see OrderStatus for the state
machine). Invalid transitions are rejected without side effects.
"""

from splitstate.application.commands.handler import Decision
from splitstate.application.commands.order_commands import ChangeOrderStatus
from splitstate.core.result import Failure, Result, Success
from splitstate.domain.entities.order import Order
from splitstate.domain.events.order_events import OrderStatusChanged


class ChangeOrderStatusHandler:
    """Handler for ChangeOrderStatus command."""

    aggregate_type = Order
    creates_aggregate = False

    def target_id(self, cmd: ChangeOrderStatus) -> str | None:
        return cmd.order_id

    def decide(
        self, cmd: ChangeOrderStatus, aggregate: Order | None, *, aggregate_id: str
    ) -> Result[Decision, str]:
        """Handle ChangeOrderStatus command.

        Returns:
            Success(Decision): Updated order and its OrderStatusChanged payload.
            Failure(error): Order deleted or transition not allowed.
        """
        assert aggregate is not None
        result = aggregate.change_status(cmd.status)
        if isinstance(result, Failure):
            return result
        return Success(
            value=Decision(
                aggregate=aggregate,
                changes=[
                    OrderStatusChanged(previous_status=result.value, status=cmd.status)
                ],
            )
        )
