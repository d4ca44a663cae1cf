"""In-memory WriteStore.

Single-process adapter used by default and in tests. The compare-and-set of
save() runs under an asyncio.Lock, so concurrent dispatches for the same
aggregate behave exactly like the SQL adapter's version check.
"""

import asyncio
import copy
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from splitstate.core.result import Failure, Result, Success
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.protocols.write_store_protocol import (
    StoredAggregate,
    VersionConflict,
)


class InMemoryWriteStore:
    """Dict-backed aggregates plus an append-only event outbox."""

    def __init__(self) -> None:
        self._aggregates: dict[str, StoredAggregate] = {}
        self._events: dict[str, list[DomainEvent]] = {}
        self._outbox: dict[UUID, DomainEvent] = {}
        self._lock = asyncio.Lock()

    async def save(
        self,
        *,
        aggregate_id: str,
        aggregate_type: str,
        expected_version: int,
        state: dict[str, Any],
        events: Sequence[DomainEvent],
    ) -> Result[int, VersionConflict]:
        async with self._lock:
            current = self._aggregates.get(aggregate_id)
            actual_version = current.version if current is not None else 0
            if actual_version != expected_version:
                return Failure(
                    error=VersionConflict(
                        aggregate_id=aggregate_id,
                        expected_version=expected_version,
                        actual_version=current.version if current is not None else None,
                    )
                )

            new_version = expected_version + 1
            last_sequence = events[-1].sequence if events else (
                current.last_sequence if current is not None else 0
            )
            self._aggregates[aggregate_id] = StoredAggregate(
                aggregate_id=aggregate_id,
                aggregate_type=aggregate_type,
                state=copy.deepcopy(state),
                version=new_version,
                last_sequence=last_sequence,
            )
            self._events.setdefault(aggregate_id, []).extend(events)
            for event in events:
                self._outbox[event.event_id] = event
            return Success(value=new_version)

    async def load(self, aggregate_id: str) -> StoredAggregate | None:
        stored = self._aggregates.get(aggregate_id)
        if stored is None:
            return None
        return StoredAggregate(
            aggregate_id=stored.aggregate_id,
            aggregate_type=stored.aggregate_type,
            state=copy.deepcopy(stored.state),
            version=stored.version,
            last_sequence=stored.last_sequence,
        )

    async def load_history(self, aggregate_id: str) -> list[DomainEvent]:
        return list(self._events.get(aggregate_id, []))

    async def fetch_undelivered(
        self, limit: int, *, after: tuple[str, int] | None = None
    ) -> list[DomainEvent]:
        pending = sorted(
            (e for e in self._outbox.values() if after is None or e.key > after),
            key=lambda event: event.key,
        )
        return pending[:limit]

    async def mark_delivered(self, event_ids: Sequence[UUID]) -> None:
        for event_id in event_ids:
            self._outbox.pop(event_id, None)

    @property
    def undelivered_count(self) -> int:
        """Events still waiting in the outbox."""
        return len(self._outbox)
