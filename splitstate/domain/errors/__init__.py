"""Domain error constants and projection exceptions.

Exports:
    OrderError: Order business-rule rejection reasons (string constants)
    ProjectionError: Base exception for failures while applying an event
    TransientProjectionError: Retryable failure (storage unavailable)
    ReadStoreUnavailableError: Read store could not be reached
    SemanticProjectionError: Non-retryable failure (bad event content)
    MalformedPayloadError: Payload does not match its event type
"""

from splitstate.domain.errors.order_error import OrderError
from splitstate.domain.errors.projection_error import (
    MalformedPayloadError,
    ProjectionError,
    ReadStoreUnavailableError,
    SemanticProjectionError,
    TransientProjectionError,
)

__all__ = [
    "MalformedPayloadError",
    "OrderError",
    "ProjectionError",
    "ReadStoreUnavailableError",
    "SemanticProjectionError",
    "TransientProjectionError",
]
