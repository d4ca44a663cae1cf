"""Commands (CQRS write operations).

Usage:
    from splitstate.application.commands import CreateOrder, ChangeOrderStatus
"""

from splitstate.application.commands.order_commands import (
    AddOrderItem,
    ChangeOrderStatus,
    CreateOrder,
    DeleteOrder,
)

__all__ = ["AddOrderItem", "ChangeOrderStatus", "CreateOrder", "DeleteOrder"]
