"""Projection engine result DTOs."""

from dataclasses import dataclass, field
from enum import Enum


class ViewStatus(str, Enum):
    """What happened to one view when an event was offered to it.

    APPLIED: event (and possibly buffered successors) applied.
    DUPLICATE: already applied earlier; no-op.
    BUFFERED: earlier sequence missing; held until the gap fills.
    STALLED: view is stalled behind a dead letter; event held.
    DEAD_LETTERED: this event failed and was dead-lettered; view now stalled.
    """

    APPLIED = "applied"
    DUPLICATE = "duplicate"
    BUFFERED = "buffered"
    STALLED = "stalled"
    DEAD_LETTERED = "dead_lettered"


@dataclass(frozen=True, kw_only=True)
class ViewOutcome:
    """Outcome for one (projection, view) pair.

    Attributes:
        projection: View kind.
        view_id: View key.
        status: What happened.
        last_applied_seq: Marker after the call.
    """

    projection: str
    view_id: str
    status: ViewStatus
    last_applied_seq: int


@dataclass(frozen=True, kw_only=True)
class ApplyOutcome:
    """Outcome of ProjectionEngine.apply for one event.

    Attributes:
        aggregate_id: Event's aggregate.
        sequence: Event's sequence number.
        views: Per-view outcomes (empty if no projector handles the event).
    """

    aggregate_id: str
    sequence: int
    views: list[ViewOutcome] = field(default_factory=list)

    @property
    def settled(self) -> bool:
        """True when every view has the event applied (now or earlier).

        Only settled events may be marked delivered in the outbox.
        """
        return all(
            view.status in (ViewStatus.APPLIED, ViewStatus.DUPLICATE)
            for view in self.views
        )


@dataclass(frozen=True, kw_only=True)
class RebuildReport:
    """Result of rebuilding all views of one aggregate.

    Attributes:
        aggregate_id: Rebuilt aggregate.
        events_replayed: Number of events in the replayed history.
        projections: Projection names that were rebuilt.
        last_applied_seq: Marker per projection after the rebuild.
        stalled: Projections that stalled during replay.
    """

    aggregate_id: str
    events_replayed: int
    projections: list[str] = field(default_factory=list)
    last_applied_seq: dict[str, int] = field(default_factory=dict)
    stalled: list[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class StalledView:
    """View held back behind a dead-lettered event.

    Attributes:
        projection: View kind.
        view_id: View key.
        failed_sequence: Sequence of the event that was dead-lettered.
        buffered: Number of events held for the view (failed one included).
    """

    projection: str
    view_id: str
    failed_sequence: int
    buffered: int
