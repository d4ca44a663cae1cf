"""CQRS Metadata Types.

Dataclasses for command registry entries.

Design Principles:
- Immutable (frozen=True) - registry entries never change at runtime
- Type-safe (kw_only=True) - explicit field assignment
- Self-documenting - clear field names and docstrings
"""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class CommandMetadata:
    """Metadata for a command in the CQRS registry.

    Attributes:
        command_class: The command dataclass (e.g., CreateOrder).
        handler_class: The handler class (e.g., CreateOrderHandler).
        aggregate_type: Aggregate kind the command targets (e.g., "order").
        creates_aggregate: True for creation commands.
        description: Human-readable description for documentation.

    Example:
        >>> CommandMetadata(
        ...     command_class=CreateOrder,
        ...     handler_class=CreateOrderHandler,
        ...     aggregate_type="order",
        ...     creates_aggregate=True,
        ...     description="Place a new order",
        ... )
    """

    command_class: type
    handler_class: type
    aggregate_type: str
    creates_aggregate: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        """Validate metadata consistency with the handler class."""
        handler_creates = getattr(self.handler_class, "creates_aggregate", None)
        if handler_creates is None:
            raise ValueError(
                f"{self.handler_class.__name__} does not declare creates_aggregate"
            )
        if handler_creates != self.creates_aggregate:
            raise ValueError(
                f"Command {self.command_class.__name__} has creates_aggregate="
                f"{self.creates_aggregate} but {self.handler_class.__name__} "
                f"declares {handler_creates}"
            )


def get_handler_name(metadata: CommandMetadata) -> str:
    """Compute the snake_case name used in logs for a command.

    Example:
        >>> get_handler_name(CommandMetadata(command_class=CreateOrder, ...))
        'create_order'
    """
    class_name = metadata.command_class.__name__

    # Convert PascalCase to snake_case
    snake_case = ""
    for i, char in enumerate(class_name):
        if char.isupper() and i > 0:
            snake_case += "_"
        snake_case += char.lower()

    return snake_case
