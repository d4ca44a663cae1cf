"""View queries (CQRS read operations).

Queries describe which views to read. They are immutable dataclasses and
never change state.

Pattern:
- Queries are data containers (no logic beyond validation)
- QueryService reads them from the read store only
- Results may lag the write side (eventual consistency)
"""

from dataclasses import dataclass, field
from typing import Any

from splitstate.application.projections.order_projectors import ORDER_SUMMARY
from splitstate.domain.enums.order_status import OrderStatus


@dataclass(frozen=True, kw_only=True)
class ViewCriteria:
    """Filter over one projection.

    Attributes:
        projection: View kind to read (e.g., "order_summary").
        filters: Equality match on top-level content fields (all must match).
        limit: Maximum number of views returned (None for no limit).
        offset: Number of matching views skipped (results ordered by view id).

    Example:
        >>> criteria = ViewCriteria(
        ...     projection="order_summary",
        ...     filters={"customer_id": "42"},
        ... )
        >>> result = await query_service.query(criteria)
    """

    projection: str
    filters: dict[str, Any] = field(default_factory=dict)
    limit: int | None = None
    offset: int = 0

    def __post_init__(self) -> None:
        """Validate paging values.

        Raises:
            ValueError: If limit or offset is negative.
        """
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must be >= 0")
        if self.offset < 0:
            raise ValueError("offset must be >= 0")


def orders_for_customer(customer_id: str, *, limit: int | None = None) -> ViewCriteria:
    """Order summaries placed by one customer."""
    return ViewCriteria(
        projection=ORDER_SUMMARY,
        filters={"customer_id": customer_id},
        limit=limit,
    )


def orders_with_status(
    status: OrderStatus, *, customer_id: str | None = None
) -> ViewCriteria:
    """Order summaries in a given status, optionally for one customer."""
    filters: dict[str, Any] = {"status": status.value}
    if customer_id is not None:
        filters["customer_id"] = customer_id
    return ViewCriteria(projection=ORDER_SUMMARY, filters=filters)
