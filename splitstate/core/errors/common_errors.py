"""Error values for missing resources and lost version races.

Usage:
    return Failure(error=NotFoundError(
        code=ErrorCode.VIEW_NOT_FOUND,
        message="View not found",
        resource_type="order_summary",
        resource_id=view_id,
    ))
"""

from dataclasses import dataclass

from splitstate.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Aggregate or view does not exist.

    A normal outcome for reads that may lag behind writes.

    Attributes:
        resource_type: Aggregate type or projection name.
        resource_id: Aggregate id or view id.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Stale expected version or an id that is already taken.

    Attributes:
        resource_type: Aggregate type in conflict.
        conflicting_field: "version" or "id".
    """

    resource_type: str
    conflicting_field: str | None = None
