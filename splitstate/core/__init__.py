"""Core shared kernel: Result types, error values, enums and settings.

Nothing here imports from domain, application or infrastructure, except the
container subpackage, which is the composition root.
"""

from splitstate.core.enums import ErrorCode
from splitstate.core.errors import ConflictError, DomainError, NotFoundError
from splitstate.core.result import Failure, Result, Success

__all__ = [
    "ConflictError",
    "DomainError",
    "ErrorCode",
    "Failure",
    "NotFoundError",
    "Result",
    "Success",
]
