"""SQLDeadLetterStore - SQLAlchemy implementation of the DeadLetterStore protocol."""

from sqlalchemy import select

from splitstate.domain.protocols.dead_letter_protocol import DeadLetter
from splitstate.infrastructure.persistence.base import as_utc
from splitstate.infrastructure.persistence.database import Database
from splitstate.infrastructure.persistence.models.dead_letter import DeadLetterRecord


class SQLDeadLetterStore:
    """Dead letters stored next to the views in the read database."""

    def __init__(self, database: Database) -> None:
        """Initialize store with the read database.

        Args:
            database: Read database (ReadBase metadata).
        """
        self._db = database

    async def record(self, dead_letter: DeadLetter) -> None:
        """Persist a dead letter."""
        async with self._db.transaction() as session:
            session.add(
                DeadLetterRecord(
                    event_id=dead_letter.event_id,
                    projection=dead_letter.projection,
                    aggregate_id=dead_letter.aggregate_id,
                    sequence=dead_letter.sequence,
                    event_type=dead_letter.event_type,
                    payload=dead_letter.payload,
                    reason=dead_letter.reason,
                    error_type=dead_letter.error_type,
                    attempts=dead_letter.attempts,
                    recorded_at=dead_letter.recorded_at,
                )
            )

    async def find(self, aggregate_id: str | None = None) -> list[DeadLetter]:
        """Dead letters, optionally for one aggregate, oldest first.

        Args:
            aggregate_id: Restrict to one aggregate (None for all).

        Returns:
            List of dead letters, empty if none.
        """
        stmt = select(DeadLetterRecord).order_by(DeadLetterRecord.id)
        if aggregate_id is not None:
            stmt = stmt.where(DeadLetterRecord.aggregate_id == aggregate_id)

        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            return [
                DeadLetter(
                    event_id=row.event_id,
                    projection=row.projection,
                    aggregate_id=row.aggregate_id,
                    sequence=row.sequence,
                    event_type=row.event_type,
                    payload=dict(row.payload),
                    reason=row.reason,
                    error_type=row.error_type,
                    attempts=row.attempts,
                    recorded_at=as_utc(row.recorded_at),
                )
                for row in result.scalars().all()
            ]
