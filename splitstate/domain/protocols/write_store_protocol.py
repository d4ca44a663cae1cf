"""WriteStore protocol (port) for durable aggregate persistence.

The write store is the single source of truth. It persists aggregate state
and, in the same transaction, the events produced by the command that changed
it (transactional outbox). Undelivered events survive a crash between commit
and projection and are picked up again by the outbox relay.

Implementations:
    - InMemoryWriteStore: splitstate/infrastructure/memory/write_store.py
    - SQLWriteStore: splitstate/infrastructure/persistence/write_store.py

Only the command dispatcher saves; the projection side only reads history
and outbox entries.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from splitstate.core.result import Result
from splitstate.domain.events.base_event import DomainEvent


@dataclass(frozen=True, slots=True, kw_only=True)
class StoredAggregate:
    """Aggregate state as loaded from the write store.

    Attributes:
        aggregate_id: Aggregate identifier.
        aggregate_type: Aggregate kind (e.g., "order").
        state: JSON-compatible authoritative state.
        version: Current version (>= 1 once saved).
        last_sequence: Highest event sequence persisted for this aggregate.
    """

    aggregate_id: str
    aggregate_type: str
    state: dict[str, Any]
    version: int
    last_sequence: int


@dataclass(frozen=True, slots=True, kw_only=True)
class VersionConflict:
    """Optimistic-concurrency loss reported by save().

    Attributes:
        aggregate_id: Aggregate that was concurrently modified.
        expected_version: Version the caller based its change on.
        actual_version: Version found in the store (None if absent).
    """

    aggregate_id: str
    expected_version: int
    actual_version: int | None


class WriteStore(Protocol):
    """Write store protocol (port).

    Methods:
        save: Persist state + events under an expected-version check
        load: Retrieve current state and version
        load_history: Full event history of one aggregate, ordered by sequence
        fetch_undelivered: Outbox entries not yet settled by the projection side
        mark_delivered: Settle outbox entries
    """

    async def save(
        self,
        *,
        aggregate_id: str,
        aggregate_type: str,
        expected_version: int,
        state: dict[str, Any],
        events: Sequence[DomainEvent],
    ) -> Result[int, VersionConflict]:
        """Persist new aggregate state and its events atomically.

        expected_version == 0 means "create"; the aggregate must not exist.

        Args:
            aggregate_id: Aggregate identifier.
            aggregate_type: Aggregate kind.
            expected_version: Version the change was computed against.
            state: New authoritative state.
            events: Stamped events produced by the change.

        Returns:
            Success(new_version): Committed; new_version == expected_version + 1.
            Failure(VersionConflict): Stored version differs; nothing written.
        """
        ...

    async def load(self, aggregate_id: str) -> StoredAggregate | None:
        """Load aggregate state (None means WriteNotFound)."""
        ...

    async def load_history(self, aggregate_id: str) -> list[DomainEvent]:
        """All events of one aggregate ordered by sequence (empty if unknown)."""
        ...

    async def fetch_undelivered(
        self, limit: int, *, after: tuple[str, int] | None = None
    ) -> list[DomainEvent]:
        """Undelivered outbox events ordered by aggregate, then sequence.

        Args:
            limit: Maximum number of events returned.
            after: Only events positioned strictly after this
                (aggregate_id, sequence) key; None starts from the beginning.
        """
        ...

    async def mark_delivered(self, event_ids: Sequence[UUID]) -> None:
        """Flag outbox events as settled (idempotent)."""
        ...
