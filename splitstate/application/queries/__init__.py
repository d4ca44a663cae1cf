"""Read side - view queries and the query service."""

from splitstate.application.queries.query_service import QueryService
from splitstate.application.queries.view_queries import (
    ViewCriteria,
    orders_for_customer,
    orders_with_status,
)

__all__ = [
    "QueryService",
    "ViewCriteria",
    "orders_for_customer",
    "orders_with_status",
]
