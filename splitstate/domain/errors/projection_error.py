"""Projection failure exceptions.

Unlike command-side failures, projection failures happen after the write
committed, inside the projection engine. They are raised by projectors and
read-store adapters and classified by the engine:

    TransientProjectionError  -> retried with backoff, marker not advanced
    SemanticProjectionError   -> dead-lettered, view stalled

Neither ever reaches the caller of dispatch().
"""


class ProjectionError(Exception):
    """Base class for failures while applying an event to a view."""


class TransientProjectionError(ProjectionError):
    """Failure that may succeed on retry (storage timeout, lost connection)."""


class ReadStoreUnavailableError(TransientProjectionError):
    """Read store could not be reached or the write did not complete."""


class SemanticProjectionError(ProjectionError):
    """Failure that will not go away on retry (bad event content)."""


class MalformedPayloadError(SemanticProjectionError):
    """Event payload does not match the shape required by its event type."""

    def __init__(self, event_type: str, reason: str) -> None:
        """Initialize with the offending event type and a reason.

        Args:
            event_type: Event type whose payload failed to parse.
            reason: What was wrong with it.
        """
        super().__init__(f"Malformed {event_type} payload: {reason}")
        self.event_type = event_type
        self.reason = reason
