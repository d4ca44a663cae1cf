"""DeleteOrder command handler.

Flags the order deleted on the write side and emits the terminal
OrderDeleted event. The write-side record is kept; read views are
tombstoned by the projection engine.
"""

from splitstate.application.commands.handler import Decision
from splitstate.application.commands.order_commands import DeleteOrder
from splitstate.core.result import Failure, Result, Success
from splitstate.domain.entities.order import Order
from splitstate.domain.events.order_events import OrderDeleted


class DeleteOrderHandler:
    """Handler for DeleteOrder command."""

    aggregate_type = Order
    creates_aggregate = False

    def target_id(self, cmd: DeleteOrder) -> str | None:
        return cmd.order_id

    def decide(
        self, cmd: DeleteOrder, aggregate: Order | None, *, aggregate_id: str
    ) -> Result[Decision, str]:
        """Handle DeleteOrder command.

        Returns:
            Success(Decision): Deleted order and its OrderDeleted payload.
            Failure(error): Order already deleted.
        """
        assert aggregate is not None
        result = aggregate.mark_deleted()
        if isinstance(result, Failure):
            return result
        return Success(
            value=Decision(aggregate=aggregate, changes=[OrderDeleted(reason=cmd.reason)])
        )
