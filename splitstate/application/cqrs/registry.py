"""CQRS Registry - Single Source of Truth for Commands.

This registry catalogs ALL commands with their metadata. Used for:
- Building the command handler routing table at startup
- Validation tests (verify no drift between commands/handlers)

Adding new commands:
1. Define command dataclass in the appropriate *_commands.py file
2. Create handler class in handlers/ directory
3. Add entry to COMMAND_REGISTRY below
4. Run tests - they'll tell you what's missing
"""

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
from splitstate.application.commands.order_commands import (
    AddOrderItem,
    ChangeOrderStatus,
    CreateOrder,
    DeleteOrder,
)
from splitstate.application.cqrs.handler_registry import CommandHandlerRegistry
from splitstate.application.cqrs.metadata import CommandMetadata
from splitstate.domain.events.registry import ORDER_AGGREGATE

# ═══════════════════════════════════════════════════════════════════════════
# COMMAND REGISTRY
# ═══════════════════════════════════════════════════════════════════════════

COMMAND_REGISTRY: list[CommandMetadata] = [
    CommandMetadata(
        command_class=CreateOrder,
        handler_class=CreateOrderHandler,
        aggregate_type=ORDER_AGGREGATE,
        creates_aggregate=True,
        description="Place a new order with its initial lines",
    ),
    CommandMetadata(
        command_class=AddOrderItem,
        handler_class=AddOrderItemHandler,
        aggregate_type=ORDER_AGGREGATE,
        description="Append a line to an open order",
    ),
    CommandMetadata(
        command_class=ChangeOrderStatus,
        handler_class=ChangeOrderStatusHandler,
        aggregate_type=ORDER_AGGREGATE,
        description="Move an order through its lifecycle",
    ),
    CommandMetadata(
        command_class=DeleteOrder,
        handler_class=DeleteOrderHandler,
        aggregate_type=ORDER_AGGREGATE,
        description="Delete an order (terminal event)",
    ),
]


def get_command_metadata(command_class: type) -> CommandMetadata | None:
    """Look up registry entry for a command class."""
    for metadata in COMMAND_REGISTRY:
        if metadata.command_class is command_class:
            return metadata
    return None


def build_handler_registry(
    entries: list[CommandMetadata] | None = None,
) -> CommandHandlerRegistry:
    """Build and freeze the routing table from registry metadata.

    Handlers take no constructor dependencies (they never touch a store),
    so each is instantiated once here.

    Args:
        entries: Metadata entries (defaults to COMMAND_REGISTRY).

    Returns:
        Frozen CommandHandlerRegistry.

    Raises:
        DuplicateHandlerError: Two entries share a command class.
    """
    registry = CommandHandlerRegistry()
    for metadata in COMMAND_REGISTRY if entries is None else entries:
        registry.register(metadata.command_class, metadata.handler_class())
    registry.freeze()
    return registry
