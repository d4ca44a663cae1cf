"""Order command handlers."""

from splitstate.application.commands.handlers.add_order_item_handler import (
    AddOrderItemHandler,
)
from splitstate.application.commands.handlers.change_order_status_handler import (
    ChangeOrderStatusHandler,
)
from splitstate.application.commands.handlers.create_order_handler import (
    CreateOrderHandler,
)
from splitstate.application.commands.handlers.delete_order_handler import (
    DeleteOrderHandler,
)

__all__ = [
    "AddOrderItemHandler",
    "ChangeOrderStatusHandler",
    "CreateOrderHandler",
    "DeleteOrderHandler",
]
