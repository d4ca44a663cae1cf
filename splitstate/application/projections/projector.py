"""Projector protocol.

A projector owns one view kind. Given the current view content (None when the
view does not exist yet) and the next event, it returns the new content, or
None to tombstone the view. Projectors are pure: the same content and event
always produce the same result, which is what makes rebuild-by-replay equal
to incremental application.

Projectors raise SemanticProjectionError (usually MalformedPayloadError)
for events they cannot apply. They never touch a store.
"""

from typing import Any, Protocol

from splitstate.domain.events.base_event import DomainEvent


class Projector(Protocol):
    """View builder for one projection.

    Attributes:
        name: Projection name used as the read-store key (e.g., "order_summary").
        aggregate_type: Aggregate kind whose events feed this view.
    """

    name: str
    aggregate_type: str

    def handles(self, event_type: str) -> bool:
        """Whether events of this type change the view."""
        ...

    def view_id(self, event: DomainEvent) -> str:
        """View key the event applies to."""
        ...

    def apply(
        self, content: dict[str, Any] | None, event: DomainEvent
    ) -> dict[str, Any] | None:
        """Return the new view content (None: tombstone the view)."""
        ...
