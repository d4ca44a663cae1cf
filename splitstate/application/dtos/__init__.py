"""Data Transfer Objects (DTOs) for application layer.

DTOs are result dataclasses returned by the dispatcher and the projection
engine.

Usage:
    from splitstate.application.dtos import DispatchReceipt, RebuildReport
"""

from splitstate.application.dtos.dispatch_dtos import DispatchReceipt
from splitstate.application.dtos.projection_dtos import (
    ApplyOutcome,
    RebuildReport,
    StalledView,
    ViewOutcome,
    ViewStatus,
)

__all__ = [
    "ApplyOutcome",
    "DispatchReceipt",
    "RebuildReport",
    "StalledView",
    "ViewOutcome",
    "ViewStatus",
]
