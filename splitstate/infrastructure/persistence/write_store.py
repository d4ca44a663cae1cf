"""SQLWriteStore - SQLAlchemy implementation of the WriteStore protocol.

Adapter for hexagonal architecture. Persists aggregate rows and outbox
events in one transaction of the write database.

Optimistic concurrency:
- Creation (expected_version == 0): INSERT; a primary-key collision means
  another command created the aggregate first.
- Mutation: UPDATE ... WHERE version = :expected; zero rows updated means
  the aggregate moved on since it was loaded.
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import IntegrityError

from splitstate.core.result import Failure, Result, Success
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.protocols.write_store_protocol import (
    StoredAggregate,
    VersionConflict,
)
from splitstate.infrastructure.persistence.base import as_utc
from splitstate.infrastructure.persistence.database import Database
from splitstate.infrastructure.persistence.models.aggregate_record import (
    AggregateRecord,
)
from splitstate.infrastructure.persistence.models.stored_event import StoredEvent


class SQLWriteStore:
    """SQLAlchemy implementation of WriteStore protocol.

    This class does NOT inherit from WriteStore (Protocol uses structural
    typing).

    Example:
        >>> store = SQLWriteStore(write_db)
        >>> result = await store.save(
        ...     aggregate_id="o-1",
        ...     aggregate_type="order",
        ...     expected_version=0,
        ...     state={...},
        ...     events=[event],
        ... )
    """

    def __init__(self, database: Database) -> None:
        """Initialize store with the write database.

        Args:
            database: Write database (WriteBase metadata).
        """
        self._db = database

    async def save(
        self,
        *,
        aggregate_id: str,
        aggregate_type: str,
        expected_version: int,
        state: dict[str, Any],
        events: Sequence[DomainEvent],
    ) -> Result[int, VersionConflict]:
        """Persist state and events atomically under the version check.

        Returns:
            Success(new_version) or Failure(VersionConflict).
        """
        new_version = expected_version + 1
        try:
            async with self._db.transaction() as session:
                if expected_version == 0:
                    session.add(
                        AggregateRecord(
                            aggregate_id=aggregate_id,
                            aggregate_type=aggregate_type,
                            state=state,
                            version=new_version,
                            last_sequence=events[-1].sequence if events else 0,
                        )
                    )
                    await session.flush()
                else:
                    values: dict[str, Any] = {"state": state, "version": new_version}
                    if events:
                        values["last_sequence"] = events[-1].sequence
                    result = await session.execute(
                        update(AggregateRecord)
                        .where(
                            AggregateRecord.aggregate_id == aggregate_id,
                            AggregateRecord.version == expected_version,
                        )
                        .values(**values)
                    )
                    if result.rowcount != 1:
                        actual = await session.scalar(
                            select(AggregateRecord.version).where(
                                AggregateRecord.aggregate_id == aggregate_id
                            )
                        )
                        return Failure(
                            error=VersionConflict(
                                aggregate_id=aggregate_id,
                                expected_version=expected_version,
                                actual_version=actual,
                            )
                        )

                session.add_all([self._to_model(event) for event in events])
        except IntegrityError:
            existing = await self.load(aggregate_id)
            return Failure(
                error=VersionConflict(
                    aggregate_id=aggregate_id,
                    expected_version=expected_version,
                    actual_version=existing.version if existing else None,
                )
            )

        return Success(value=new_version)

    async def load(self, aggregate_id: str) -> StoredAggregate | None:
        """Load aggregate state.

        Args:
            aggregate_id: Aggregate identifier.

        Returns:
            StoredAggregate if found, None otherwise.
        """
        async with self._db.get_session() as session:
            record = await session.get(AggregateRecord, aggregate_id)
            if record is None:
                return None
            return StoredAggregate(
                aggregate_id=record.aggregate_id,
                aggregate_type=record.aggregate_type,
                state=dict(record.state),
                version=record.version,
                last_sequence=record.last_sequence,
            )

    async def load_history(self, aggregate_id: str) -> list[DomainEvent]:
        """All events of one aggregate ordered by sequence."""
        async with self._db.get_session() as session:
            result = await session.execute(
                select(StoredEvent)
                .where(StoredEvent.aggregate_id == aggregate_id)
                .order_by(StoredEvent.sequence)
            )
            return [self._to_event(model) for model in result.scalars().all()]

    async def fetch_undelivered(
        self, limit: int, *, after: tuple[str, int] | None = None
    ) -> list[DomainEvent]:
        """Undelivered outbox events ordered by aggregate, then sequence."""
        stmt = select(StoredEvent).where(StoredEvent.delivered.is_(False))
        if after is not None:
            aggregate_id, sequence = after
            stmt = stmt.where(
                or_(
                    StoredEvent.aggregate_id > aggregate_id,
                    and_(
                        StoredEvent.aggregate_id == aggregate_id,
                        StoredEvent.sequence > sequence,
                    ),
                )
            )

        async with self._db.get_session() as session:
            result = await session.execute(
                stmt.order_by(StoredEvent.aggregate_id, StoredEvent.sequence).limit(limit)
            )
            return [self._to_event(model) for model in result.scalars().all()]

    async def mark_delivered(self, event_ids: Sequence[UUID]) -> None:
        """Flag outbox events as delivered (idempotent)."""
        if not event_ids:
            return
        async with self._db.transaction() as session:
            await session.execute(
                update(StoredEvent)
                .where(
                    StoredEvent.event_id.in_(list(event_ids)),
                    StoredEvent.delivered.is_(False),
                )
                .values(delivered=True, delivered_at=datetime.now(UTC))
            )

    def _to_model(self, event: DomainEvent) -> StoredEvent:
        return StoredEvent(
            event_id=event.event_id,
            aggregate_id=event.aggregate_id,
            aggregate_type=event.aggregate_type,
            sequence=event.sequence,
            event_type=event.event_type,
            payload=event.payload,
            occurred_at=event.occurred_at,
            delivered=False,
        )

    def _to_event(self, model: StoredEvent) -> DomainEvent:
        return DomainEvent(
            event_id=model.event_id,
            occurred_at=as_utc(model.occurred_at),
            aggregate_id=model.aggregate_id,
            aggregate_type=model.aggregate_type,
            sequence=model.sequence,
            event_type=model.event_type,
            payload=dict(model.payload),
        )
