"""Domain entities (write-side aggregates)."""

from splitstate.domain.entities.aggregate import Aggregate
from splitstate.domain.entities.order import Order

__all__ = ["Aggregate", "Order"]
