"""Command handler registry configuration errors.

These are programming/configuration errors, so they are raised rather than
returned: they surface at startup when the routing table is built.
"""


class DuplicateHandlerError(Exception):
    """A handler is already registered for this command type."""

    def __init__(self, command_type: type) -> None:
        super().__init__(f"Handler already registered for {command_type.__name__}")
        self.command_type = command_type


class RegistryFrozenError(Exception):
    """The registry was frozen at the end of startup."""

    def __init__(self, command_type: type) -> None:
        super().__init__(
            f"Cannot register {command_type.__name__}: handler registry is frozen"
        )
        self.command_type = command_type
