"""Application layer errors.

Exports:
    ApplicationError: Application layer error dataclass
    ApplicationErrorCode: Application-level error code enum
    DuplicateHandlerError: Second handler registered for a command type
    RegistryFrozenError: Registration attempted after startup
"""

from splitstate.application.errors.application_error import (
    ApplicationError,
    ApplicationErrorCode,
)
from splitstate.application.errors.registry_error import (
    DuplicateHandlerError,
    RegistryFrozenError,
)

__all__ = [
    "ApplicationError",
    "ApplicationErrorCode",
    "DuplicateHandlerError",
    "RegistryFrozenError",
]
