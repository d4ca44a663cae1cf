"""Command handler registry.

Maps command types to handler instances. Built once, explicitly, at process
startup and passed to the dispatcher; frozen afterwards so the routing table
is read-only at runtime.

Usage:
    registry = CommandHandlerRegistry()
    registry.register(CreateOrder, CreateOrderHandler())
    registry.freeze()

    handler = registry.resolve(CreateOrder)  # None if not registered
"""

from splitstate.application.commands.handler import CommandHandler
from splitstate.application.errors.registry_error import (
    DuplicateHandlerError,
    RegistryFrozenError,
)


class CommandHandlerRegistry:
    """Routing table from command type to handler.

    Exactly one handler per command type. Lookup is by exact type (no
    inheritance matching).
    """

    def __init__(self) -> None:
        self._handlers: dict[type, CommandHandler] = {}
        self._frozen = False

    def register(self, command_type: type, handler: CommandHandler) -> None:
        """Register the handler for a command type.

        Args:
            command_type: Command dataclass.
            handler: Handler instance.

        Raises:
            DuplicateHandlerError: A handler is already registered for command_type.
            RegistryFrozenError: Registry was frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(command_type)
        if command_type in self._handlers:
            raise DuplicateHandlerError(command_type)
        self._handlers[command_type] = handler

    def resolve(self, command_type: type) -> CommandHandler | None:
        """Return the handler for command_type, or None (not registered)."""
        return self._handlers.get(command_type)

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def command_types(self) -> list[type]:
        """Registered command types in registration order."""
        return list(self._handlers)

    def __contains__(self, command_type: object) -> bool:
        return command_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
