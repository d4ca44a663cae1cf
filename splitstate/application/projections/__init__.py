"""Projection pipeline - events to read views.

Exports:
    ProjectionEngine: ordered, idempotent event application
    ProjectionEventChannel: after-commit hand-off from the dispatcher
    OutboxRelay: catch-up delivery from the write store outbox
    RetryPolicy: backoff for transient projection failures
    Projector, OrderSummaryProjector, OrderLinesProjector: view builders
"""

from splitstate.application.projections.channel import ProjectionEventChannel, deliver
from splitstate.application.projections.engine import ProjectionEngine
from splitstate.application.projections.order_projectors import (
    ORDER_LINES,
    ORDER_SUMMARY,
    OrderLinesProjector,
    OrderSummaryProjector,
    default_projectors,
)
from splitstate.application.projections.projector import Projector
from splitstate.application.projections.relay import OutboxRelay
from splitstate.application.projections.retry import RetryPolicy

__all__ = [
    "ORDER_LINES",
    "ORDER_SUMMARY",
    "OrderLinesProjector",
    "OrderSummaryProjector",
    "OutboxRelay",
    "ProjectionEngine",
    "ProjectionEventChannel",
    "Projector",
    "RetryPolicy",
    "default_projectors",
    "deliver",
]
