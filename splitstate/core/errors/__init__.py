"""Error values shared by the write and read sides."""

from splitstate.core.errors.common_errors import ConflictError, NotFoundError
from splitstate.core.errors.domain_error import DomainError

__all__ = [
    "ConflictError",
    "DomainError",
    "NotFoundError",
]
