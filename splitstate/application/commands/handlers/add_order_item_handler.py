"""AddOrderItem command handler."""

from splitstate.application.commands.handler import Decision
from splitstate.application.commands.order_commands import AddOrderItem
from splitstate.core.result import Failure, Result, Success
from splitstate.domain.entities.order import Order
from splitstate.domain.events.order_events import OrderItemAdded


class AddOrderItemHandler:
    """Handler for AddOrderItem command.

    Appends a line while the order is still pending or paid.
    """

    aggregate_type = Order
    creates_aggregate = False

    def target_id(self, cmd: AddOrderItem) -> str | None:
        return cmd.order_id

    def decide(
        self, cmd: AddOrderItem, aggregate: Order | None, *, aggregate_id: str
    ) -> Result[Decision, str]:
        """Handle AddOrderItem command.

        Returns:
            Success(Decision): Updated order and its OrderItemAdded payload.
            Failure(error): Order deleted, locked, or invalid line.
        """
        assert aggregate is not None
        result = aggregate.add_item(cmd.item)
        if isinstance(result, Failure):
            return result
        return Success(
            value=Decision(aggregate=aggregate, changes=[OrderItemAdded(item=cmd.item)])
        )
