"""Machine-readable codes carried by DomainError values."""

from enum import Enum


class ErrorCode(Enum):
    """Codes for missing aggregates or views and for conflicts."""

    AGGREGATE_NOT_FOUND = "aggregate_not_found"
    VIEW_NOT_FOUND = "view_not_found"

    VERSION_CONFLICT = "version_conflict"
    RESOURCE_CONFLICT = "resource_conflict"
