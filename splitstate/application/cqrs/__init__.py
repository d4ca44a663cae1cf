"""CQRS command side - registry, routing and dispatch.

Architecture:
- COMMAND_REGISTRY catalogues every command with its handler
- build_handler_registry() turns the catalogue into a frozen routing table
- CommandDispatcher executes commands against the write store

Adding new commands:
1. Define command dataclass in the appropriate *_commands.py file
2. Create handler class in application/commands/handlers/
3. Add entry to COMMAND_REGISTRY
"""

from splitstate.application.commands.handler import CommandHandler, Decision
from splitstate.application.cqrs.dispatcher import CommandDispatcher
from splitstate.application.cqrs.handler_registry import CommandHandlerRegistry
from splitstate.application.cqrs.metadata import CommandMetadata, get_handler_name
from splitstate.application.cqrs.registry import (
    COMMAND_REGISTRY,
    build_handler_registry,
    get_command_metadata,
)

__all__ = [
    # Registry
    "COMMAND_REGISTRY",
    "CommandMetadata",
    "build_handler_registry",
    "get_command_metadata",
    "get_handler_name",
    # Routing and dispatch
    "CommandDispatcher",
    "CommandHandler",
    "CommandHandlerRegistry",
    "Decision",
]
